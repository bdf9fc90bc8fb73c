from __future__ import annotations

import time

from .adapters.json_utils import parse_json_object
from .adapters.llm import LLMAdapter
from .adapters.schema import ANALYSIS_RESPONSE_SCHEMA, REQUIRED_ANALYSIS_KEYS, validate_analysis
from .errors import AnalysisValidationError, EmptyResultError
from .models import GenerationRequest, ScriptAnalysis
from .monitoring import get_logger, increment, record_timing
from .prompts import MAX_TRANSCRIPT_CHARS, build_analysis_prompt, build_generation_prompt

logger = get_logger(__name__)


def analyze_transcript(transcript: str, adapter: LLMAdapter, strict: bool = False) -> ScriptAnalysis:
    """Extract the stylistic analysis of a transcript.

    The model is called in JSON mode; a Markdown code fence around the answer
    is tolerated. With ``strict`` the parsed object must pass
    ``validate_analysis``; otherwise missing fields come back empty and are
    only logged.

    Raises:
        ValueError: empty transcript
        AnalysisParseError: the answer is not a JSON object
        AnalysisValidationError: strict mode and the object is malformed
    """
    if not transcript:
        raise ValueError("Transcript is required")
    if len(transcript) > MAX_TRANSCRIPT_CHARS:
        logger.debug("Transcript truncated from %d to %d characters", len(transcript), MAX_TRANSCRIPT_CHARS)

    uses_schema = adapter.supports_response_schema
    prompt = build_analysis_prompt(transcript, include_schema=not uses_schema)
    start = time.time()
    raw = adapter.generate_from_prompt(
        prompt, json_mode=True, response_schema=ANALYSIS_RESPONSE_SCHEMA if uses_schema else None
    )
    record_timing("analysis_sec", time.time() - start)

    data = parse_json_object(raw)
    ok, errors = validate_analysis(data)
    if not ok:
        if strict:
            raise AnalysisValidationError(errors)
        logger.warning("Analysis accepted with problems: %s", "; ".join(errors))
    missing = [k for k in REQUIRED_ANALYSIS_KEYS if k not in data]
    if missing:
        increment("analysis_missing_fields", len(missing))

    analysis = ScriptAnalysis.from_dict(data)
    increment("analyses")
    logger.info("Analysis complete: %d sections, %d key elements", len(analysis.structure), len(analysis.key_elements))
    return analysis


def generate_new_script(analysis: ScriptAnalysis, topic: str, adapter: LLMAdapter) -> str:
    """Write a new Markdown script about ``topic`` in the style of ``analysis``.

    Raises:
        EmptyResultError: the model returned no text
    """
    request = GenerationRequest(reference_analysis=analysis, new_topic=topic)
    prompt = build_generation_prompt(request.reference_analysis, request.new_topic)
    start = time.time()
    script = adapter.generate_from_prompt(prompt, json_mode=False)
    record_timing("generation_sec", time.time() - start)
    if not script or not script.strip():
        raise EmptyResultError("No script generated")
    increment("scripts_generated")
    logger.info("Generated script for topic %r (%d characters)", topic, len(script))
    return script


class ScriptService:
    """Binds an adapter (and the strict-analysis switch) for the wizard."""

    def __init__(self, adapter: LLMAdapter, strict: bool = False):
        self.adapter = adapter
        self.strict = strict

    def analyze_transcript(self, transcript: str) -> ScriptAnalysis:
        return analyze_transcript(transcript, self.adapter, strict=self.strict)

    def generate_new_script(self, analysis: ScriptAnalysis, topic: str) -> str:
        return generate_new_script(analysis, topic, self.adapter)
