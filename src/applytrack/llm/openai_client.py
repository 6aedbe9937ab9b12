from __future__ import annotations

from contextlib import closing
from typing import Any, Iterator

import requests

from applytrack import config as app_config

from ._fields import get_first_record, get_record, get_str
from ._http import iter_sse_json, post_json, read_json
from ._json import decode_json_output
from .base import LLMClient, LLMConfig
from .errors import MissingContentError
from .types import GenerationRequest, LLMMessage


def build_messages(request: GenerationRequest) -> list[LLMMessage]:
    messages: list[LLMMessage] = []
    if request.system:
        messages.append(LLMMessage(role="system", content=request.system))
    messages.append(LLMMessage(role="user", content=request.prompt))
    return messages


def message_content(data: Any) -> str | None:
    """``choices[0].message.content`` of a chat completion, if present."""
    return get_str(get_record(get_first_record(data, "choices"), "message"), "content")


def delta_content(data: Any) -> str | None:
    """``choices[0].delta.content`` of a streamed chunk, if present."""
    return get_str(get_record(get_first_record(data, "choices"), "delta"), "content")


class OpenAILLM(LLMClient):
    """OpenAI chat-completions client over plain HTTP.

    JSON mode sets ``response_format={"type": "json_object"}``; the reply is
    still run through the resilient extractor. Streaming reads SSE frames up
    to the ``[DONE]`` sentinel.
    """

    def __init__(
        self,
        config: LLMConfig | None = None,
        *,
        session: requests.Session | None = None,
    ):
        self._cfg = config or LLMConfig()
        self._session = session
        base_url = self._cfg.base_url or app_config.OPENAI_BASE_URL
        self._url = base_url.rstrip("/") + "/chat/completions"

    def _headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {request.api_key}",
            "Content-Type": "application/json",
        }

    def _body(self, request: GenerationRequest, **extra: Any) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": m.role, "content": m.content} for m in build_messages(request)
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        body.update(extra)
        return body

    def _post(
        self, request: GenerationRequest, body: dict[str, Any], *, stream: bool = False
    ) -> requests.Response:
        return post_json(
            self._url,
            headers=self._headers(request),
            body=body,
            context=f"OpenAI ({request.model})",
            session=self._session,
            stream=stream,
            timeout=self._cfg.timeout_s,
        )

    def _complete(self, request: GenerationRequest, body: dict[str, Any]) -> str:
        response = self._post(request, body)
        try:
            data = read_json(response, context="OpenAI")
        finally:
            response.close()
        return message_content(data) or ""

    def generate_text(self, request: GenerationRequest) -> str:
        content = self._complete(request, self._body(request))
        if not content:
            raise MissingContentError("OpenAI response missing content")
        return content

    def stream_text(self, request: GenerationRequest) -> Iterator[str]:
        response = self._post(request, self._body(request, stream=True), stream=True)
        with closing(iter_sse_json(response, context="OpenAI stream")) as frames:
            for frame in frames:
                content = delta_content(frame)
                if content:
                    yield content

    def generate_json(
        self,
        request: GenerationRequest,
        *,
        json_schema: dict[str, Any] | None = None,
    ) -> Any:
        body = self._body(request, response_format={"type": "json_object"})
        raw = self._complete(request, body)
        if not raw:
            raise MissingContentError("OpenAI response missing JSON content")
        return decode_json_output(raw, json_schema)
