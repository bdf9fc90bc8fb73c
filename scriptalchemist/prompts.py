from __future__ import annotations

import json
from pathlib import Path

from .models import ScriptAnalysis

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Longer transcripts are cut silently; the tail never reaches the model.
MAX_TRANSCRIPT_CHARS = 20000

_ANALYSIS_FALLBACK = (
    "Analyze this video transcript and describe its hook strategy, pacing, tone, target audience, "
    "section structure and key stylistic elements. Write all values in Korean.\n\n"
    'Transcript:\n"{transcript}"\n{schema_section}'
)
_SCHEMA_FALLBACK = (
    "\nRespond with a JSON object with keys hookStrategy, pacing, tone, targetAudience, "
    "structure (list of {sectionName, description}) and keyElements (list of strings).\n"
)
_GENERATION_FALLBACK = (
    'Write a brand new YouTube script in Korean about "{topic}", mimicking the style of this analysis:\n'
    "{analysis_json}\n"
    "Output Markdown (not JSON) and include [Visual Notes] in brackets."
)


def load_template(name: str, fallback: str) -> str:
    path = TEMPLATE_DIR / name
    if path.exists():
        return path.read_text(encoding="utf-8")
    return fallback


def truncate_transcript(transcript: str, limit: int = MAX_TRANSCRIPT_CHARS) -> str:
    return transcript[:limit]


def build_analysis_prompt(transcript: str, include_schema: bool = True) -> str:
    """Prompt for the style-extraction call.

    ``include_schema`` spells the JSON schema out in the prompt; providers that
    take a declarative response schema skip it.
    """
    tmpl = load_template("analysis_prompt.txt", _ANALYSIS_FALLBACK)
    schema_section = load_template("analysis_schema.txt", _SCHEMA_FALLBACK) if include_schema else ""
    return tmpl.format(transcript=truncate_transcript(transcript), schema_section=schema_section)


def serialize_analysis(analysis: ScriptAnalysis) -> str:
    return json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2)


def build_generation_prompt(analysis: ScriptAnalysis, topic: str) -> str:
    tmpl = load_template("generation_prompt.txt", _GENERATION_FALLBACK)
    return tmpl.format(topic=topic, analysis_json=serialize_analysis(analysis))
