from __future__ import annotations

from typing import Any, Dict

from .llm import HTTPLLMAdapter, JSON_ONLY_INSTRUCTION

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIAdapter(HTTPLLMAdapter):
    """Adapter for the OpenAI Chat Completions API.

    In JSON mode a system message asking for JSON only is prepended and
    ``response_format`` is set to ``json_object``.
    """

    name = "openai"
    label = "OpenAI"
    default_model = DEFAULT_OPENAI_MODEL

    def endpoint(self) -> str:
        return OPENAI_CHAT_URL

    def build_headers(self) -> Dict[str, str]:
        headers = super().build_headers()
        headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def build_payload(self, prompt: str, json_mode: bool) -> Dict[str, Any]:
        messages = [{"role": "user", "content": prompt}]
        if json_mode:
            messages.insert(0, {"role": "system", "content": JSON_ONLY_INSTRUCTION})
        payload: Dict[str, Any] = {"model": self.model, "messages": messages}
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def extract_text(self, data: Any) -> str:
        return data["choices"][0]["message"]["content"]
