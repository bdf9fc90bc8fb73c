from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from ..errors import ConfigurationError, ProviderError, TransportError
from ..monitoring import increment, record_timing
from ..settings import ProviderConfig

logger = logging.getLogger(__name__)

JSON_ONLY_INSTRUCTION = "You must respond with valid JSON only. Follow the exact schema requested in the user prompt."


class LLMAdapter(ABC):
    """Abstract interface for the provider adapters.

    Every provider turns ``generate_from_prompt(prompt, json_mode)`` into one
    request and returns the completion text. ``response_schema`` is a hint for
    providers that accept a declarative output schema; others ignore it and
    rely on the schema spelled out in the prompt.
    """

    name = "llm"
    default_model = ""
    supports_response_schema = False

    def __init__(self, config: ProviderConfig):
        self.config = config

    @property
    def model(self) -> str:
        return self.config.model or self.default_model

    def require_api_key(self) -> str:
        if not self.config.api_key:
            raise ConfigurationError(
                "API key is not set. Run `scriptalchemist config set ai_api_key <key>` first."
            )
        return self.config.api_key

    @abstractmethod
    def generate_from_prompt(
        self, prompt: str, json_mode: bool = False, response_schema: Optional[Dict[str, Any]] = None
    ) -> str:
        """Send one completion request and return the model's text."""
        raise NotImplementedError()


class HTTPLLMAdapter(LLMAdapter):
    """Base for providers reached over plain HTTPS POST with a JSON body.

    Subclasses describe the request (``endpoint``, ``build_headers``,
    ``build_payload``) and how to read the answer (``extract_text``). Sending,
    status checking and error translation live here.
    """

    label = "LLM"

    def __init__(self, config: ProviderConfig, session: Optional[requests.Session] = None):
        super().__init__(config)
        self.session = session or requests.Session()

    def endpoint(self) -> str:
        raise NotImplementedError()

    def build_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    @abstractmethod
    def build_payload(self, prompt: str, json_mode: bool) -> Dict[str, Any]:
        raise NotImplementedError()

    @abstractmethod
    def extract_text(self, data: Any) -> str:
        raise NotImplementedError()

    def generate_from_prompt(
        self, prompt: str, json_mode: bool = False, response_schema: Optional[Dict[str, Any]] = None
    ) -> str:
        self.require_api_key()
        url = self.endpoint()
        payload = self.build_payload(prompt, json_mode)
        logger.info("Calling %s (model=%s, json_mode=%s)", self.label, self.model, json_mode)

        start = time.time()
        increment(f"{self.name}_requests")
        try:
            response = self.session.post(
                url, headers=self.build_headers(), json=payload, timeout=self.config.timeout
            )
        except requests.RequestException as e:
            increment(f"{self.name}_errors")
            logger.error("%s request failed before a response arrived: %s", self.label, e)
            raise self.transport_error(e) from e
        finally:
            record_timing(f"{self.name}_request_sec", time.time() - start)

        if not 200 <= response.status_code < 300:
            increment(f"{self.name}_errors")
            logger.error("%s returned HTTP %s", self.label, response.status_code)
            raise self.http_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.label} API returned a non-JSON body", provider=self.name, status_code=response.status_code
            ) from e

        try:
            text = self.extract_text(data)
        except (KeyError, IndexError, TypeError) as e:
            logger.debug("Unexpected %s response shape: %r", self.label, data)
            raise ProviderError(
                f"{self.label} API returned an unexpected response shape", provider=self.name,
                status_code=response.status_code,
            ) from e
        return text if text is not None else ""

    def transport_error(self, exc: requests.RequestException) -> TransportError:
        return TransportError(f"{self.label} API request could not be sent: {exc}")

    def http_error(self, response: requests.Response) -> ProviderError:
        """Prefer the provider's ``error.message``; fall back to status and body."""
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message")
            elif isinstance(error, str):
                message = error
        if not message:
            message = f"{self.label} API request failed ({response.status_code}): {response.text}"
        return ProviderError(message, provider=self.name, status_code=response.status_code)
