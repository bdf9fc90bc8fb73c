"""Shared JSON helpers for model output.

Models asked for JSON frequently wrap it in a Markdown code fence; these
helpers remove the fence and parse the payload strictly.
"""

import json
import logging
import re
from typing import Any, Dict

from ..errors import AnalysisParseError

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"```(?:json)?\n?")
_FENCE_CLOSE = re.compile(r"```\n?$")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence.

    Only applies when the trimmed text starts with a fence; otherwise the
    trimmed text is returned unchanged.

    Examples:
        >>> strip_code_fence('```json\\n{"a": 1}\\n```')
        '{"a": 1}'

        >>> strip_code_fence('{"a": 1}')
        '{"a": 1}'
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    logger.debug("Stripping Markdown code fence from model output")
    stripped = _FENCE_OPEN.sub("", stripped)
    stripped = _FENCE_CLOSE.sub("", stripped)
    return stripped.strip()


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse model output as a JSON object, tolerating a code fence.

    Raises:
        AnalysisParseError: if the text is not valid JSON or not an object.
    """
    candidate = strip_code_fence(text or "")
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug("Model output is not valid JSON: %s", e)
        raise AnalysisParseError(f"Model response is not valid JSON: {e}", raw=text) from e
    if not isinstance(parsed, dict):
        raise AnalysisParseError(
            f"Model response must be a JSON object, got {type(parsed).__name__}", raw=text
        )
    return parsed
