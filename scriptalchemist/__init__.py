"""ScriptAlchemist - reverse-engineer a video script's style and reuse it.

The package analyzes a reference transcript with an LLM provider (OpenAI,
Anthropic, Gemini or a custom endpoint), then writes a new script on another
topic in the same style.
"""

__version__ = "0.1.0"

from .models import AppStep, GenerationRequest, ScriptAnalysis, ScriptSection
from .script_generator import ScriptService, analyze_transcript, generate_new_script
from .workflow import ScriptWizard

__all__ = [
    "AppStep",
    "GenerationRequest",
    "ScriptAnalysis",
    "ScriptSection",
    "ScriptService",
    "ScriptWizard",
    "analyze_transcript",
    "generate_new_script",
]
