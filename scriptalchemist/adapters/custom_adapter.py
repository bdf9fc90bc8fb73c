"""Adapter for a user-hosted endpoint with an unknown response format.

The request is a generic envelope carrying both a bare prompt and a chat
message list, so most self-hosted gateways can pick whichever they expect.
The answer is located by probing well-known field names.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Tuple

import requests

from ..errors import ConfigurationError, ProviderError, TransportError
from .llm import HTTPLLMAdapter

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_MODEL = "default"


def _first_choice(data: Dict[str, Any]) -> Dict[str, Any]:
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _nested_content(container: Any) -> Any:
    return container.get("content") if isinstance(container, dict) else None


# Probed in order; the first truthy value wins.
RESPONSE_FIELD_PROBES: List[Tuple[str, Callable[[Dict[str, Any]], Any]]] = [
    ("response", lambda d: d.get("response")),
    ("content", lambda d: d.get("content")),
    ("text", lambda d: d.get("text")),
    ("message.content", lambda d: _nested_content(d.get("message"))),
    ("choices[0].message.content", lambda d: _nested_content(_first_choice(d).get("message"))),
    ("choices[0].text", lambda d: _first_choice(d).get("text")),
]


def resolve_response_text(data: Any) -> str:
    """Return the completion text from an arbitrary JSON body.

    Falls back to the whole body serialized as JSON when no known field holds
    a value.
    """
    if isinstance(data, dict):
        for field_name, probe in RESPONSE_FIELD_PROBES:
            value = probe(data)
            if value:
                logger.debug("Custom API response text found in '%s'", field_name)
                return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    logger.debug("No known text field in custom API response; returning serialized body")
    return json.dumps(data, ensure_ascii=False)


class CustomAPIAdapter(HTTPLLMAdapter):
    name = "custom"
    label = "Custom"
    default_model = DEFAULT_CUSTOM_MODEL

    def endpoint(self) -> str:
        if not self.config.api_url:
            raise ConfigurationError(
                "Custom API URL is not set. Run `scriptalchemist config set ai_api_url <url>` first."
            )
        return self.config.api_url

    def build_headers(self) -> Dict[str, str]:
        headers = super().build_headers()
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def build_payload(self, prompt: str, json_mode: bool) -> Dict[str, Any]:
        return {
            "prompt": prompt,
            "json_mode": json_mode,
            "messages": [{"role": "user", "content": prompt}],
            "model": self.model,
        }

    def extract_text(self, data: Any) -> str:
        return resolve_response_text(data)

    def transport_error(self, exc: requests.RequestException) -> TransportError:
        return TransportError(
            "Network error: cannot reach the API server. "
            "Check the URL and CORS settings, or route the request through a proxy."
        )

    def http_error(self, response: requests.Response) -> ProviderError:
        return ProviderError(
            f"Custom API request failed ({response.status_code}): {response.text}",
            provider=self.name,
            status_code=response.status_code,
        )
