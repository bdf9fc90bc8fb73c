"""Plain-text rendering for the terminal wizard."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Union

from .models import AppStep, ScriptAnalysis
from .workflow import PHASE_LABELS

LOADING_MESSAGES = {
    AppStep.ANALYZING: "Analyzing transcript... identifying hook, pacing and emotional triggers.",
    AppStep.GENERATING: "Writing script... applying the reference style to the new topic.",
}


def render_step_indicator(phase_index: int) -> str:
    """One-line progress bar, e.g. ``[x] Input  [>] Analysis  [ ] Topic  [ ] Result``."""
    parts = []
    for idx, label in enumerate(PHASE_LABELS):
        if idx < phase_index:
            mark = "x"
        elif idx == phase_index:
            mark = ">"
        else:
            mark = " "
        parts.append(f"[{mark}] {label}")
    return "  ".join(parts)


def render_analysis(analysis: ScriptAnalysis) -> str:
    lines: List[str] = [
        "Style analysis complete",
        "=" * 23,
        "",
        f"Hook strategy:    {analysis.hook_strategy}",
        f"Tone:             {analysis.tone}",
        f"Pacing:           {analysis.pacing}",
        f"Target audience:  {analysis.target_audience}",
        "",
        "Narrative structure:",
    ]
    if analysis.structure:
        for idx, section in enumerate(analysis.structure, start=1):
            lines.append(f"  {idx}. {section.section_name}: {section.description}")
    else:
        lines.append("  (none)")
    lines.append("")
    lines.append("Key elements:")
    if analysis.key_elements:
        lines.extend(f"  - {element}" for element in analysis.key_elements)
    else:
        lines.append("  (none)")
    return "\n".join(lines)


# Whitespace, path separators and characters Windows rejects in file names
_UNSAFE_FILENAME_CHARS = re.compile(r'[\s/\\:*?"<>|]+')


def script_filename(topic: str) -> str:
    """File name for a topic's script, e.g. ``learning_to_cook_script.md``.

    Leading dots are dropped so a topic like ``../x`` stays a plain name.
    """
    stem = _UNSAFE_FILENAME_CHARS.sub("_", topic).lstrip(".")
    return (stem or "untitled") + "_script.md"


def save_script(script: str, topic: str, out_dir: Union[str, Path]) -> Path:
    """Write the script as Markdown under ``out_dir`` and return the path."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / script_filename(topic)
    path.write_text(script, encoding="utf-8")
    return path
