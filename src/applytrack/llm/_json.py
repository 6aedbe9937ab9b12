from __future__ import annotations

import json
import re
from typing import Any

from jsonschema import validate
from jsonschema.exceptions import ValidationError as _SchemaValidationError

from .errors import JsonExtractionError, LLMValidationError

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_OPENERS = "{["
_CLOSERS = "}]"


def extract_json_string(text: str) -> str | None:
    """Locate the most likely JSON document inside free-form model output.

    A fenced code block wins. Otherwise we walk from the first ``{``/``[``
    tracking nesting depth, skipping anything inside string literals, and
    return the slice that closes the first bracket. Returns None when no
    balanced candidate exists.
    """

    fence = _FENCE_RE.search(text)
    if fence and fence.group(1):
        return fence.group(1)

    match = re.search(r"[\[{]", text)
    if match is None:
        return None
    start = match.start()

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(text)):
        ch = text[i]

        if escape_next:
            escape_next = False
            continue
        if in_string:
            if ch == "\\":
                escape_next = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            continue

        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth == 0:
                if _CLOSERS.index(ch) != _OPENERS.index(text[start]):
                    return None
                return text[start : i + 1]
            if depth < 0:
                return None

    return None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _strict_loads(text: str) -> Any:
    # NaN / Infinity are not JSON and would not survive a dumps/loads round trip.
    return json.loads(text, parse_constant=_reject_constant)


def parse_json(text: str) -> Any:
    """Parse JSON from a model response, tolerating prose, fences and trailing commas."""

    trimmed = (text or "").strip()
    if not trimmed:
        raise JsonExtractionError("Empty JSON response")

    try:
        return _strict_loads(trimmed)
    except (ValueError, RecursionError):
        pass

    candidate = extract_json_string(trimmed)
    if candidate is None:
        raise JsonExtractionError("Failed to parse JSON from response")

    normalized = _TRAILING_COMMA_RE.sub(r"\1", candidate).strip()
    try:
        return _strict_loads(normalized)
    except (ValueError, RecursionError) as e:
        raise JsonExtractionError("Failed to parse JSON from response") from e


def validate_json(instance: Any, schema: dict[str, Any]) -> None:
    try:
        validate(instance=instance, schema=schema)
    except _SchemaValidationError as e:
        raise LLMValidationError(f"JSON schema validation failed: {e.message}") from e


def decode_json_output(raw: str, json_schema: dict[str, Any] | None = None) -> Any:
    data = parse_json(raw)
    if json_schema is not None:
        validate_json(data, json_schema)
    return data
