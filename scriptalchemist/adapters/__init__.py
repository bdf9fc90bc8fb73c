from .llm import LLMAdapter, HTTPLLMAdapter
from .factory import PROVIDERS, get_llm_adapter
from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter
from .gemini_adapter import GeminiRESTAdapter
from .custom_adapter import CustomAPIAdapter, resolve_response_text
from .google_adapter import GoogleGenAIAdapter

__all__ = [
    "LLMAdapter",
    "HTTPLLMAdapter",
    "PROVIDERS",
    "get_llm_adapter",
    "OpenAIAdapter",
    "AnthropicAdapter",
    "GeminiRESTAdapter",
    "CustomAPIAdapter",
    "resolve_response_text",
    "GoogleGenAIAdapter",
]
