from __future__ import annotations

import json
from typing import Any, Iterator

import requests

from applytrack import logger as logger_mod

from ._normalize import backend_error_from_response, transport_error
from ._sse import iter_sse_data
from .errors import BackendError

log = logger_mod.get_logger()


def post_json(
    url: str,
    *,
    headers: dict[str, str],
    body: dict[str, Any],
    context: str,
    session: requests.Session | None = None,
    stream: bool = False,
    timeout: float | None = None,
) -> requests.Response:
    """POST a JSON body and return the response, or raise a normalized error.

    On a non-success status the response is read for its error message and
    closed before BackendError is raised.
    """

    http = session if session is not None else requests
    log.debug("POST %s (%s, stream=%s)", url, context, stream)
    try:
        response = http.post(
            url, headers=headers, json=body, stream=stream, timeout=timeout
        )
    except requests.exceptions.RequestException as e:
        raise transport_error(e, context=context) from e

    if not response.ok:
        try:
            err = backend_error_from_response(response)
        finally:
            response.close()
        log.warning(f"{context} failed with HTTP {err.status}: {err.message}")
        raise err

    return response


def read_json(response: requests.Response, *, context: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise BackendError(
            f"{context} returned a non-JSON body", status=response.status_code
        ) from e


def iter_sse_json(response: requests.Response, *, context: str) -> Iterator[Any]:
    """Decode each SSE ``data:`` payload of a streaming response as JSON.

    Stops at the ``[DONE]`` sentinel without yielding it. The response is
    always closed, including when the consumer stops iterating early.
    """

    try:
        try:
            for payload in iter_sse_data(response.iter_content(chunk_size=None)):
                if payload == "[DONE]":
                    return
                if not payload:
                    continue
                try:
                    yield json.loads(payload)
                except json.JSONDecodeError as e:
                    raise BackendError(
                        f"{context} sent a malformed stream frame: {payload[:200]}"
                    ) from e
        except requests.exceptions.RequestException as e:
            raise transport_error(e, context=context) from e
    finally:
        response.close()
