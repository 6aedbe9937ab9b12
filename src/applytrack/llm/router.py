"""Single entry point for generation calls.

Each call picks the adapter for ``request.provider`` and delegates to it.
Errors propagate untouched; nothing is cached between calls.
"""

from __future__ import annotations

from typing import Any, Iterator

import requests

from .base import LLMConfig
from .factory import build_llm
from .types import GenerationRequest


def generate_text(
    request: GenerationRequest,
    *,
    config: LLMConfig | None = None,
    session: requests.Session | None = None,
) -> str:
    return build_llm(request.provider, config=config, session=session).generate_text(
        request
    )


def stream_text(
    request: GenerationRequest,
    *,
    config: LLMConfig | None = None,
    session: requests.Session | None = None,
) -> Iterator[str]:
    """Lazily stream text chunks; nothing is sent until the first chunk is pulled."""
    client = build_llm(request.provider, config=config, session=session)
    yield from client.stream_text(request)


def generate_json(
    request: GenerationRequest,
    *,
    json_schema: dict[str, Any] | None = None,
    config: LLMConfig | None = None,
    session: requests.Session | None = None,
) -> Any:
    return build_llm(request.provider, config=config, session=session).generate_json(
        request, json_schema=json_schema
    )
