"""Session data types: the analysis result, wizard steps and generation input."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Tuple


class AppStep(IntEnum):
    INPUT_TRANSCRIPT = 0
    ANALYZING = 1
    REVIEW_ANALYSIS = 2
    INPUT_TOPIC = 3
    GENERATING = 4
    RESULT = 5


@dataclass(frozen=True)
class ScriptSection:
    section_name: str
    description: str


@dataclass(frozen=True)
class ScriptAnalysis:
    """Stylistic DNA of a reference transcript.

    Field names are snake_case here; ``from_dict``/``to_dict`` use the
    camelCase names the model is asked to emit.
    """

    hook_strategy: str = ""
    pacing: str = ""
    tone: str = ""
    target_audience: str = ""
    structure: Tuple[ScriptSection, ...] = field(default_factory=tuple)
    key_elements: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScriptAnalysis":
        """Build an analysis leniently: missing or mistyped fields become empty."""
        sections = []
        raw_structure = data.get("structure")
        if isinstance(raw_structure, list):
            for item in raw_structure:
                if isinstance(item, dict):
                    sections.append(
                        ScriptSection(
                            section_name=_as_text(item.get("sectionName")),
                            description=_as_text(item.get("description")),
                        )
                    )
        raw_elements = data.get("keyElements")
        elements = [_as_text(e) for e in raw_elements] if isinstance(raw_elements, list) else []
        return cls(
            hook_strategy=_as_text(data.get("hookStrategy")),
            pacing=_as_text(data.get("pacing")),
            tone=_as_text(data.get("tone")),
            target_audience=_as_text(data.get("targetAudience")),
            structure=tuple(sections),
            key_elements=tuple(elements),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hookStrategy": self.hook_strategy,
            "pacing": self.pacing,
            "tone": self.tone,
            "targetAudience": self.target_audience,
            "structure": [
                {"sectionName": s.section_name, "description": s.description} for s in self.structure
            ],
            "keyElements": list(self.key_elements),
        }


@dataclass(frozen=True)
class GenerationRequest:
    reference_analysis: ScriptAnalysis
    new_topic: str


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
