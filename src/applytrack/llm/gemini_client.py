from __future__ import annotations

from typing import Any, Callable, Iterator

from google import genai
from google.genai import types as genai_types

from applytrack import logger as logger_mod

from ._json import decode_json_output
from ._normalize import from_sdk_error
from .base import LLMClient, LLMConfig
from .errors import LLMError, MissingContentError
from .types import GenerationRequest

log = logger_mod.get_logger()


def build_prompt(request: GenerationRequest) -> str:
    if not request.system:
        return request.prompt
    return f"{request.system}\n\n{request.prompt}"


def _response_text(resp: Any) -> str:
    text = getattr(resp, "text", None)
    return text if isinstance(text, str) else ""


class GeminiLLM(LLMClient):
    """Gemini client on the google-genai SDK.

    ``client_factory`` builds the SDK client from ``api_key`` (and optional
    ``http_options``); it defaults to ``genai.Client``.
    """

    def __init__(
        self,
        config: LLMConfig | None = None,
        *,
        client_factory: Callable[..., Any] | None = None,
    ):
        self._cfg = config or LLMConfig()
        self._client_factory = client_factory or genai.Client

    def _client(self, request: GenerationRequest) -> Any:
        kwargs: dict[str, Any] = {"api_key": request.api_key}
        if self._cfg.base_url or self._cfg.timeout_s is not None:
            kwargs["http_options"] = genai_types.HttpOptions(
                base_url=self._cfg.base_url,
                # HttpOptions.timeout is in milliseconds
                timeout=(
                    int(self._cfg.timeout_s * 1000)
                    if self._cfg.timeout_s is not None
                    else None
                ),
            )
        return self._client_factory(**kwargs)

    def _generation_config(
        self, request: GenerationRequest, *, json_mode: bool = False
    ) -> genai_types.GenerateContentConfig:
        return genai_types.GenerateContentConfig(
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )

    def _generate(self, request: GenerationRequest, *, json_mode: bool) -> str:
        context = f"Gemini ({request.model})"
        log.debug("generate_content %s (json=%s)", context, json_mode)
        client = self._client(request)
        contents = build_prompt(request)
        gen_config = self._generation_config(request, json_mode=json_mode)
        try:
            resp = client.models.generate_content(
                model=request.model, contents=contents, config=gen_config
            )
            return _response_text(resp)
        except LLMError:
            raise
        except Exception as e:  # noqa: BLE001
            err = from_sdk_error(e, context=context)
            log.warning(f"{context} failed: {err}")
            raise err from e

    def generate_text(self, request: GenerationRequest) -> str:
        text = self._generate(request, json_mode=False)
        if not text:
            raise MissingContentError("Gemini response missing content")
        return text

    def stream_text(self, request: GenerationRequest) -> Iterator[str]:
        context = f"Gemini stream ({request.model})"
        log.debug("generate_content_stream %s", context)
        client = self._client(request)
        contents = build_prompt(request)
        gen_config = self._generation_config(request)
        stream = None
        try:
            stream = client.models.generate_content_stream(
                model=request.model, contents=contents, config=gen_config
            )
            for chunk in stream:
                text = _response_text(chunk)
                if text:
                    yield text
        except LLMError:
            raise
        except Exception as e:  # noqa: BLE001
            raise from_sdk_error(e, context=context) from e
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                close()

    def generate_json(
        self,
        request: GenerationRequest,
        *,
        json_schema: dict[str, Any] | None = None,
    ) -> Any:
        raw = self._generate(request, json_mode=True)
        if not raw:
            raise MissingContentError("Gemini response missing JSON content")
        return decode_json_output(raw, json_schema)
