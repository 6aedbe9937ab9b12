from __future__ import annotations

import dataclasses
from contextlib import closing
from typing import Any, Iterator

import requests

from applytrack import config as app_config
from applytrack import logger as logger_mod

from ._fields import get_first_record, get_record, get_str
from ._http import iter_sse_json, post_json, read_json
from ._json import decode_json_output
from .base import LLMClient, LLMConfig
from .errors import BackendError, MissingContentError
from .types import GenerationRequest

log = logger_mod.get_logger()

JSON_ONLY_INSTRUCTION = "Return only valid JSON."


def content_text(data: Any) -> str | None:
    """``content[0].text`` of a messages response, if present."""
    return get_str(get_first_record(data, "content"), "text")


def delta_text(frame: Any) -> str | None:
    """Text carried by a ``content_block_delta``/``text_delta`` stream event."""
    if get_str(frame, "type") != "content_block_delta":
        return None
    delta = get_record(frame, "delta")
    if get_str(delta, "type") != "text_delta":
        return None
    return get_str(delta, "text")


def with_json_instruction(request: GenerationRequest) -> GenerationRequest:
    # No structured-output flag on this API; ask for JSON in the system text.
    system = (
        f"{request.system}\n\n{JSON_ONLY_INSTRUCTION}"
        if request.system
        else JSON_ONLY_INSTRUCTION
    )
    return dataclasses.replace(request, system=system)


class AnthropicLLM(LLMClient):
    """Anthropic messages API client over plain HTTP."""

    def __init__(
        self,
        config: LLMConfig | None = None,
        *,
        session: requests.Session | None = None,
    ):
        self._cfg = config or LLMConfig()
        self._session = session
        base_url = self._cfg.base_url or app_config.ANTHROPIC_BASE_URL
        self._url = base_url.rstrip("/") + "/messages"

    def _headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "x-api-key": request.api_key,
            "anthropic-version": app_config.ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def _body(self, request: GenerationRequest, **extra: Any) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system:
            body["system"] = request.system
        body.update(extra)
        return body

    def _post(
        self, request: GenerationRequest, body: dict[str, Any], *, stream: bool = False
    ) -> requests.Response:
        return post_json(
            self._url,
            headers=self._headers(request),
            body=body,
            context=f"Anthropic ({request.model})",
            session=self._session,
            stream=stream,
            timeout=self._cfg.timeout_s,
        )

    def _complete(self, request: GenerationRequest) -> str:
        response = self._post(request, self._body(request))
        try:
            data = read_json(response, context="Anthropic")
        finally:
            response.close()
        return content_text(data) or ""

    def generate_text(self, request: GenerationRequest) -> str:
        text = self._complete(request)
        if not text:
            raise MissingContentError("Anthropic response missing content")
        return text

    def stream_text(self, request: GenerationRequest) -> Iterator[str]:
        response = self._post(request, self._body(request, stream=True), stream=True)
        with closing(iter_sse_json(response, context="Anthropic stream")) as frames:
            for frame in frames:
                if get_str(frame, "type") == "error":
                    message = get_str(get_record(frame, "error"), "message")
                    log.warning(f"Anthropic stream error event: {message}")
                    raise BackendError(message or "Anthropic stream error")
                text = delta_text(frame)
                if text:
                    yield text

    def generate_json(
        self,
        request: GenerationRequest,
        *,
        json_schema: dict[str, Any] | None = None,
    ) -> Any:
        raw = self._complete(with_json_instruction(request))
        if not raw:
            raise MissingContentError("Anthropic response missing JSON content")
        return decode_json_output(raw, json_schema)
