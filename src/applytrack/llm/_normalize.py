"""Collapse backend-specific failures into the errors in ``errors.py``.

Extracted messages are a best-effort convenience; callers should branch on
the exception type (and ``BackendError.status``), never on message text.
"""

from __future__ import annotations

import json

import requests

from ._fields import get_record, get_str
from .errors import BackendError, LLMError, TransportError


def error_message_from_body(text: str | None, reason: str | None = None) -> str:
    if not text:
        return reason or "Unknown error"

    try:
        data = json.loads(text)
    except ValueError:
        return text

    message = get_str(get_record(data, "error"), "message")
    return message or text


def backend_error_from_response(response: requests.Response) -> BackendError:
    try:
        body = response.text
    except requests.exceptions.RequestException:
        body = ""
    message = error_message_from_body(body, getattr(response, "reason", None))
    return BackendError(message, status=response.status_code)


def transport_error(error: Exception, *, context: str) -> TransportError:
    return TransportError(f"{context}: {error}")


def from_sdk_error(error: Exception, *, context: str) -> LLMError:
    """Map an SDK exception onto the taxonomy.

    SDK API errors carry the HTTP status in an integer ``code`` attribute;
    anything without one is treated as a transport failure.
    """

    if isinstance(error, LLMError):
        return error

    code = getattr(error, "code", None)
    if isinstance(code, int) and not isinstance(code, bool):
        message = getattr(error, "message", None)
        if not isinstance(message, str) or not message:
            message = str(error) or f"HTTP {code}"
        return BackendError(message, status=code)

    return transport_error(error, context=context)
