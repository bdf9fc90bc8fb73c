"""Gemini through the google-genai SDK.

Unlike the REST adapters this path can hand the model a declarative response
schema, so the required analysis fields are enforced by the provider rather
than only requested in the prompt.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors

from ..errors import ProviderError, TransportError
from ..monitoring import increment, record_timing
from ..settings import ProviderConfig
from .llm import LLMAdapter

logger = logging.getLogger(__name__)

DEFAULT_GENAI_MODEL = "gemini-2.5-flash"


class GoogleGenAIAdapter(LLMAdapter):
    """Adapter for Gemini models via ``genai.Client``.

    The key comes from ``gemini_api_key`` (or ``GEMINI_API_KEY``/``API_KEY``)
    through the ProviderConfig. A pre-built client can be injected for tests.
    """

    name = "genai"
    default_model = DEFAULT_GENAI_MODEL
    supports_response_schema = True

    def __init__(self, config: ProviderConfig, client: Any = None):
        super().__init__(config)
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.require_api_key())
            logger.info("Initialized google-genai client - LLM: %s", self.model)
        return self._client

    def build_config(self, json_mode: bool, response_schema: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not json_mode:
            return None
        config: Dict[str, Any] = {"response_mime_type": "application/json"}
        if response_schema:
            config["response_schema"] = response_schema
        return config

    def generate_from_prompt(
        self, prompt: str, json_mode: bool = False, response_schema: Optional[Dict[str, Any]] = None
    ) -> str:
        self.require_api_key()
        kwargs: Dict[str, Any] = {"model": self.model, "contents": prompt}
        config = self.build_config(json_mode, response_schema)
        if config is not None:
            kwargs["config"] = config
        logger.info("Calling Gemini SDK (model=%s, json_mode=%s, schema=%s)", self.model, json_mode, bool(response_schema))

        start = time.time()
        increment("genai_requests")
        try:
            response = self.client.models.generate_content(**kwargs)
        except genai_errors.APIError as e:
            increment("genai_errors")
            logger.error("Gemini SDK returned an error: %s", e)
            raise ProviderError(e.message or str(e), provider=self.name, status_code=e.code) from e
        except httpx.TransportError as e:
            increment("genai_errors")
            logger.error("Gemini SDK request could not be sent: %s", e)
            raise TransportError(f"Gemini API request could not be sent: {e}") from e
        finally:
            record_timing("genai_request_sec", time.time() - start)

        return getattr(response, "text", None) or ""
