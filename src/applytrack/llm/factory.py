from __future__ import annotations

from typing import assert_never

import requests

from .anthropic_client import AnthropicLLM
from .base import LLMClient, LLMConfig
from .gemini_client import GeminiLLM
from .openai_client import OpenAILLM
from .types import Provider


def build_llm(
    provider: Provider | str,
    *,
    config: LLMConfig | None = None,
    session: requests.Session | None = None,
) -> LLMClient:
    """Factory for provider clients.

    Providers:
    - gemini (google-genai SDK)
    - openai (chat completions over HTTP)
    - anthropic (messages over HTTP)

    ``session`` is only used by the HTTP backends. Unknown provider strings
    raise UnsupportedProviderError.
    """

    p = Provider.parse(provider)
    if p is Provider.GEMINI:
        return GeminiLLM(config)
    if p is Provider.OPENAI:
        return OpenAILLM(config, session=session)
    if p is Provider.ANTHROPIC:
        return AnthropicLLM(config, session=session)

    assert_never(p)
