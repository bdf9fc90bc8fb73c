from __future__ import annotations

import logging
from typing import Dict, Optional, Type

import requests

from ..errors import ConfigurationError
from ..settings import ProviderConfig
from .anthropic_adapter import AnthropicAdapter
from .custom_adapter import CustomAPIAdapter
from .gemini_adapter import GeminiRESTAdapter
from .google_adapter import GoogleGenAIAdapter
from .llm import HTTPLLMAdapter, LLMAdapter
from .openai_adapter import OpenAIAdapter

logger = logging.getLogger(__name__)

# One entry per provider; adding a provider means adding one adapter class here.
PROVIDERS: Dict[str, Type[LLMAdapter]] = {
    "openai": OpenAIAdapter,
    "anthropic": AnthropicAdapter,
    "gemini": GeminiRESTAdapter,
    "custom": CustomAPIAdapter,
    "genai": GoogleGenAIAdapter,
}


def get_llm_adapter(config: ProviderConfig, session: Optional[requests.Session] = None) -> LLMAdapter:
    """Return the adapter for ``config.provider``.

    ``session`` is handed to HTTP adapters (tests pass a fake one). Unknown
    providers raise ConfigurationError instead of silently picking another.
    """
    chosen = (config.provider or "").lower()
    logger.debug("Resolving LLM adapter: %s", chosen)
    adapter_cls = PROVIDERS.get(chosen)
    if adapter_cls is None:
        raise ConfigurationError(
            f"Unsupported AI provider: {config.provider}. Choose one of: {', '.join(PROVIDERS)}"
        )
    if issubclass(adapter_cls, HTTPLLMAdapter):
        adapter: LLMAdapter = adapter_cls(config, session=session)
    else:
        adapter = adapter_cls(config)
    logger.info("Initialized %s LLM adapter", chosen)
    return adapter
