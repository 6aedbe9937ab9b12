from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from applytrack import config

from .errors import UnsupportedProviderError

Role = Literal["system", "user", "assistant"]


class Provider(str, Enum):
    """Closed set of generation backends."""

    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"

    @classmethod
    def parse(cls, value: Provider | str) -> Provider:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise UnsupportedProviderError(f"Unsupported LLM provider: {value}")

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Provider.GEMINI: "Gemini",
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
}


@dataclass(frozen=True)
class LLMMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class GenerationRequest:
    """One fully-formed generation call.

    Built fresh per call and never mutated; use ``dataclasses.replace`` to
    derive a variant (e.g. a different system text).
    """

    provider: Provider
    api_key: str = field(repr=False)
    model: str
    prompt: str
    system: str | None = None
    temperature: float = config.DEFAULT_TEMPERATURE
    max_tokens: int = config.DEFAULT_MAX_TOKENS

    def __post_init__(self) -> None:
        # Accept plain strings ("openai") for convenience; store the enum.
        object.__setattr__(self, "provider", Provider.parse(self.provider))
