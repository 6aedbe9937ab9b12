from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Protocol

from .types import GenerationRequest


@dataclass(frozen=True)
class LLMConfig:
    """Per-adapter transport settings.

    ``base_url=None`` means the backend's public endpoint. ``timeout_s=None``
    means no deadline; callers who want one set it here.
    """

    base_url: str | None = None
    timeout_s: float | None = None


class LLMClient(Protocol):
    """The three-operation contract every backend adapter implements."""

    def generate_text(self, request: GenerationRequest) -> str:
        raise NotImplementedError

    def stream_text(self, request: GenerationRequest) -> Iterator[str]:
        raise NotImplementedError

    def generate_json(
        self,
        request: GenerationRequest,
        *,
        json_schema: dict[str, Any] | None = None,
    ) -> Any:
        raise NotImplementedError
