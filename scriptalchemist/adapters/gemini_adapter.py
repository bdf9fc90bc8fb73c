from __future__ import annotations

from typing import Any, Dict

from .llm import HTTPLLMAdapter

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"


class GeminiRESTAdapter(HTTPLLMAdapter):
    """Adapter for the Gemini ``generateContent`` REST endpoint.

    The API key travels as the ``key`` query parameter. JSON mode asks for an
    ``application/json`` response mime type.
    """

    name = "gemini"
    label = "Gemini"
    default_model = DEFAULT_GEMINI_MODEL

    def endpoint(self) -> str:
        return f"{GEMINI_BASE_URL}/{self.model}:generateContent?key={self.config.api_key}"

    def build_payload(self, prompt: str, json_mode: bool) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    def extract_text(self, data: Any) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]
