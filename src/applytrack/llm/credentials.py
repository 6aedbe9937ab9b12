from __future__ import annotations

import os
from typing import Mapping

from applytrack import config

from .errors import MissingApiKeyError
from .types import GenerationRequest, Provider

# First match wins. GOOGLE_API_KEY is the legacy name for Gemini keys.
PROVIDER_ENV_VARS: dict[Provider, tuple[str, ...]] = {
    Provider.GEMINI: ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    Provider.OPENAI: ("OPENAI_API_KEY",),
    Provider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
}


def provider_env_vars(provider: Provider | str) -> tuple[str, ...]:
    return PROVIDER_ENV_VARS[Provider.parse(provider)]


def resolve_api_key(
    provider: Provider | str, env: Mapping[str, str] | None = None
) -> tuple[str | None, str]:
    """Return ``(api_key, env_var)`` for a provider.

    When no variable is set the key is None and ``env_var`` names the
    preferred variable, for "please set X" messages.
    """

    env = os.environ if env is None else env
    env_vars = provider_env_vars(provider)
    for name in env_vars:
        value = env.get(name)
        if value:
            return value, name
    return None, env_vars[0]


def require_api_key(
    provider: Provider | str, env: Mapping[str, str] | None = None
) -> str:
    api_key, _ = resolve_api_key(provider, env)
    if api_key:
        return api_key
    names = " or ".join(provider_env_vars(provider))
    raise MissingApiKeyError(f"{names} not configured")


def request_from_env(
    prompt: str,
    *,
    system: str | None = None,
    provider: Provider | str | None = None,
    model: str | None = None,
    temperature: float = config.DEFAULT_TEMPERATURE,
    max_tokens: int = config.DEFAULT_MAX_TOKENS,
    env: Mapping[str, str] | None = None,
) -> GenerationRequest:
    """Build a request from LLM_PROVIDER / LLM_MODEL and the provider's key variable."""

    p = Provider.parse(provider or config.LLM_PROVIDER)
    return GenerationRequest(
        provider=p,
        api_key=require_api_key(p, env),
        model=model or config.LLM_MODEL,
        prompt=prompt,
        system=system,
        temperature=temperature,
        max_tokens=max_tokens,
    )
