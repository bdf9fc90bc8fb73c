"""Wizard state machine.

    INPUT_TRANSCRIPT -> ANALYZING -> REVIEW_ANALYSIS -> INPUT_TOPIC -> GENERATING -> RESULT

The two network calls happen inside ``run_analysis`` and ``run_generation``;
while one is outstanding the wizard sits in ANALYZING or GENERATING. A failed
call returns the wizard to the step before the action with ``error`` set.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from .errors import ScriptAlchemistError
from .models import AppStep, ScriptAnalysis
from .monitoring import get_logger

logger = get_logger(__name__)

ANALYSIS_FAILED_MESSAGE = "Transcript analysis failed. Please try again."
GENERATION_FAILED_MESSAGE = "Script generation failed."

# Step indicator phases: input, analysis, topic, result
PHASE_LABELS = ("Input", "Analysis", "Topic", "Result")


def phase_for_step(step: AppStep) -> int:
    """Index into PHASE_LABELS for a wizard step."""
    if step >= AppStep.GENERATING:
        return 3
    if step >= AppStep.INPUT_TOPIC:
        return 2
    if step >= AppStep.ANALYZING:
        return 1
    return 0


class ScriptServiceProtocol(Protocol):
    def analyze_transcript(self, transcript: str) -> ScriptAnalysis:
        ...

    def generate_new_script(self, analysis: ScriptAnalysis, topic: str) -> str:
        ...


class ScriptWizard:
    """Session state plus the transitions between wizard steps."""

    def __init__(self, service: ScriptServiceProtocol, on_step_change: Optional[Callable[[AppStep], None]] = None):
        self.service = service
        self.on_step_change = on_step_change
        self.step = AppStep.INPUT_TRANSCRIPT
        self.transcript = ""
        self.analysis: Optional[ScriptAnalysis] = None
        self.topic = ""
        self.generated_script = ""
        self.error: Optional[str] = None
        self.is_loading = False

    def _go(self, step: AppStep) -> None:
        if step != self.step:
            logger.debug("Wizard step %s -> %s", self.step.name, step.name)
        self.step = step
        if self.on_step_change is not None:
            self.on_step_change(step)

    def _fail_analysis(self, exc: Exception) -> None:
        self.analysis = None
        self.error = str(exc) or ANALYSIS_FAILED_MESSAGE
        self._go(AppStep.INPUT_TRANSCRIPT)

    def _fail_generation(self, exc: Exception) -> None:
        self.generated_script = ""
        self.error = str(exc) or GENERATION_FAILED_MESSAGE
        self._go(AppStep.INPUT_TOPIC)

    def run_analysis(self) -> bool:
        """INPUT_TRANSCRIPT -> ANALYZING -> REVIEW_ANALYSIS (or back on failure).

        Returns False without doing anything when the transcript is blank.
        """
        if not self.transcript.strip():
            return False
        self.is_loading = True
        self.error = None
        self._go(AppStep.ANALYZING)
        try:
            self.analysis = self.service.analyze_transcript(self.transcript)
        except ScriptAlchemistError as e:
            logger.warning("Analysis failed: %s", e)
            self._fail_analysis(e)
            return False
        except Exception as e:
            logger.exception("Unexpected error during analysis")
            self._fail_analysis(e)
            return False
        finally:
            self.is_loading = False
        self._go(AppStep.REVIEW_ANALYSIS)
        return True

    def proceed_to_topic(self) -> None:
        self._go(AppStep.INPUT_TOPIC)

    def back_to_transcript(self) -> None:
        self._go(AppStep.INPUT_TRANSCRIPT)

    def back_to_analysis(self) -> None:
        self._go(AppStep.REVIEW_ANALYSIS)

    def run_generation(self) -> bool:
        """INPUT_TOPIC -> GENERATING -> RESULT (or back on failure).

        Returns False without doing anything when the topic is blank or no
        analysis is available.
        """
        if not self.topic.strip() or self.analysis is None:
            return False
        self.is_loading = True
        self.error = None
        self._go(AppStep.GENERATING)
        try:
            self.generated_script = self.service.generate_new_script(self.analysis, self.topic)
        except ScriptAlchemistError as e:
            logger.warning("Generation failed: %s", e)
            self._fail_generation(e)
            return False
        except Exception as e:
            logger.exception("Unexpected error during generation")
            self._fail_generation(e)
            return False
        finally:
            self.is_loading = False
        self._go(AppStep.RESULT)
        return True

    def reset(self) -> None:
        """Start over: back to the first step with every field cleared."""
        self.transcript = ""
        self.analysis = None
        self.topic = ""
        self.generated_script = ""
        self.error = None
        self._go(AppStep.INPUT_TRANSCRIPT)

    def phase_index(self) -> int:
        return phase_for_step(self.step)
