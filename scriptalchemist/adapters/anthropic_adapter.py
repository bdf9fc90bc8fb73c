from __future__ import annotations

from typing import Any, Dict

from .llm import HTTPLLMAdapter

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-sonnet-20241022"
MAX_TOKENS = 8192

JSON_SYSTEM_PROMPT = "You must respond with valid JSON only. Do not include any text outside the JSON structure."


class AnthropicAdapter(HTTPLLMAdapter):
    """Adapter for the Anthropic Messages API."""

    name = "anthropic"
    label = "Anthropic"
    default_model = DEFAULT_ANTHROPIC_MODEL

    def endpoint(self) -> str:
        return ANTHROPIC_MESSAGES_URL

    def build_headers(self) -> Dict[str, str]:
        headers = super().build_headers()
        headers["x-api-key"] = self.config.api_key
        headers["anthropic-version"] = ANTHROPIC_VERSION
        return headers

    def build_payload(self, prompt: str, json_mode: bool) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self.model, "max_tokens": MAX_TOKENS}
        # system is omitted entirely outside JSON mode
        if json_mode:
            payload["system"] = JSON_SYSTEM_PROMPT
        payload["messages"] = [{"role": "user", "content": prompt}]
        return payload

    def extract_text(self, data: Any) -> str:
        return data["content"][0]["text"]
