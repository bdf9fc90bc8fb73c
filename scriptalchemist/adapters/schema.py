from typing import Any, Dict, List, Tuple


REQUIRED_ANALYSIS_KEYS = [
    "hookStrategy",
    "pacing",
    "tone",
    "targetAudience",
    "structure",
    "keyElements",
]

STRING_KEYS = ["hookStrategy", "pacing", "tone", "targetAudience"]

# Declarative response schema for providers that accept one (google-genai).
ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "hookStrategy": {"type": "STRING"},
        "pacing": {"type": "STRING"},
        "tone": {"type": "STRING"},
        "targetAudience": {"type": "STRING"},
        "structure": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "sectionName": {"type": "STRING"},
                    "description": {"type": "STRING"},
                },
            },
        },
        "keyElements": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
        },
    },
    "required": REQUIRED_ANALYSIS_KEYS,
}


def validate_analysis(data: Any) -> Tuple[bool, List[str]]:
    """Validate the structure of a parsed analysis using simple structural checks.

    Returns (True, []) if valid, otherwise (False, [error messages]).
    """
    errors: List[str] = []
    if not isinstance(data, dict):
        errors.append("Analysis must be a JSON object/dict.")
        return False, errors
    for key in REQUIRED_ANALYSIS_KEYS:
        if key not in data:
            errors.append(f"Missing required key: {key}")
    for key in STRING_KEYS:
        if key in data and not isinstance(data[key], str):
            errors.append(f"'{key}' must be a string")
    structure = data.get("structure")
    if "structure" in data:
        if not isinstance(structure, list):
            errors.append("'structure' must be a list.")
        else:
            for idx, section in enumerate(structure):
                if not isinstance(section, dict):
                    errors.append(f"Section at index {idx} must be an object.")
                    continue
                for key in ("sectionName", "description"):
                    if not isinstance(section.get(key), str):
                        errors.append(f"Section at index {idx} missing string key: {key}")
    if "keyElements" in data:
        elements = data["keyElements"]
        if not isinstance(elements, list) or not all(isinstance(e, str) for e in elements):
            errors.append("'keyElements' must be a list of strings.")

    return (len(errors) == 0), errors
