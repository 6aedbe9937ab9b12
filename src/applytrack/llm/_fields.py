"""Type-checked accessors for JSON payloads returned by backends.

Every helper returns ``None`` on a shape mismatch instead of raising, so the
adapters can turn "field missing" into a MissingContentError themselves.
"""

from __future__ import annotations

from typing import Any


def get_record(data: Any, key: str) -> dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, dict) else None


def get_first_record(data: Any, key: str) -> dict[str, Any] | None:
    """Return ``data[key][0]`` when it is a list whose first item is an object."""
    if not isinstance(data, dict):
        return None
    items = data.get(key)
    if not isinstance(items, list) or not items:
        return None
    first = items[0]
    return first if isinstance(first, dict) else None


def get_str(data: Any, key: str) -> str | None:
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, str) else None
