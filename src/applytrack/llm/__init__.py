"""Unified generation client (Gemini / OpenAI / Anthropic).

Design goals:
- Keep provider-specific SDKs and wire formats isolated in one adapter each.
- Provide a small, stable interface: generate text, stream text, generate JSON.
- Recover JSON deterministically from prose, code fences and trailing commas.
- Stateless: no caching, retries or rate limiting; callers layer those on.

Usage:

    from applytrack.llm import GenerationRequest, generate_json

    req = GenerationRequest(provider="openai", api_key=key, model="gpt-4o-mini",
                            prompt="List three colors as a JSON array")
    colors = generate_json(req)
"""

from ._json import parse_json
from .base import LLMClient, LLMConfig
from .credentials import request_from_env, require_api_key, resolve_api_key
from .errors import (
    BackendError,
    JsonExtractionError,
    LLMError,
    LLMValidationError,
    MissingApiKeyError,
    MissingContentError,
    TransportError,
    UnsupportedProviderError,
)
from .factory import build_llm
from .router import generate_json, generate_text, stream_text
from .types import GenerationRequest, LLMMessage, Provider

__all__ = [
    "BackendError",
    "GenerationRequest",
    "JsonExtractionError",
    "LLMClient",
    "LLMConfig",
    "LLMError",
    "LLMMessage",
    "LLMValidationError",
    "MissingApiKeyError",
    "MissingContentError",
    "Provider",
    "TransportError",
    "UnsupportedProviderError",
    "build_llm",
    "generate_json",
    "generate_text",
    "parse_json",
    "request_from_env",
    "require_api_key",
    "resolve_api_key",
    "stream_text",
]
