import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# This repo uses a src/ layout; make the package importable without an
# editable install.
_SRC = str(Path(__file__).resolve().parents[1] / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


class FakeResponse:
    """Just enough of requests.Response for the HTTP adapters."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        json_data=None,
        text: str | None = None,
        chunks=None,
        reason: str = "OK",
    ):
        self.status_code = status_code
        self.reason = reason
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self._text = text
        self._chunks = chunks if chunks is not None else []
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self._text

    def json(self):
        return json.loads(self._text)

    def iter_content(self, chunk_size=None):
        for chunk in self._chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk

    def close(self):
        self.closed = True


class FakeSession:
    """Records every POST and replays queued responses (or raises queued errors)."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        resp = self._responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


class FakeGeminiStream:
    def __init__(self, texts):
        self._texts = list(texts)
        self.closed = False

    def __iter__(self):
        for t in self._texts:
            if isinstance(t, Exception):
                raise t
            yield SimpleNamespace(text=t)

    def close(self):
        self.closed = True


class FakeGeminiModels:
    def __init__(self, *, text=None, stream_texts=(), error=None):
        self.text = text
        self.stream = FakeGeminiStream(stream_texts)
        self.error = error
        self.calls: list[dict] = []

    def generate_content(self, *, model, contents, config):
        self.calls.append(
            {"op": "generate", "model": model, "contents": contents, "config": config}
        )
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)

    def generate_content_stream(self, *, model, contents, config):
        self.calls.append(
            {"op": "stream", "model": model, "contents": contents, "config": config}
        )
        if self.error:
            raise self.error
        return self.stream


class FakeGeminiClientFactory:
    """Stands in for ``genai.Client``; remembers constructor kwargs."""

    def __init__(self, models: FakeGeminiModels):
        self.models = models
        self.kwargs: list[dict] = []

    def __call__(self, **kwargs):
        self.kwargs.append(kwargs)
        return SimpleNamespace(models=self.models)


def split_every(data: bytes, n: int) -> list[bytes]:
    return [data[i : i + n] for i in range(0, len(data), n)]


@pytest.fixture
def make_response():
    """Fixture: factory for FakeResponse."""
    return FakeResponse


@pytest.fixture
def make_session():
    """Fixture: factory for FakeSession(*responses)."""
    return FakeSession


@pytest.fixture
def gemini_fake():
    """Fixture: build (models, client_factory) for a canned Gemini reply."""

    def _factory(**kwargs):
        models = FakeGeminiModels(**kwargs)
        return models, FakeGeminiClientFactory(models)

    return _factory


@pytest.fixture
def chunked():
    """Fixture: split bytes into fixed-size reads."""
    return split_every


@pytest.fixture
def sse_bytes():
    """Fixture: encode payloads as ``data:`` frames (optional ``event:`` lines)."""

    def _factory(payloads, *, events=None) -> bytes:
        out = []
        for i, payload in enumerate(payloads):
            if not isinstance(payload, str):
                payload = json.dumps(payload)
            if events:
                out.append(f"event: {events[i]}\n")
            out.append(f"data: {payload}\n\n")
        return "".join(out).encode("utf-8")

    return _factory
