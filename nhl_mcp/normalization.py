"""Field extraction helpers shared by the normalizers.

Upstream documents omit fields inconsistently, so every read here is
defensive: absence is a valid state and maps to a documented default.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping


def localized(value: Any) -> str:
    """Read the default-locale string from a ``{"default": ...}`` wrapper, or ''."""
    if isinstance(value, Mapping):
        text = value.get("default")
        return text if isinstance(text, str) else ""
    return ""


def localized_or_none(value: Any) -> str | None:
    """Like ``localized`` but returns None when the wrapper or string is absent."""
    return localized(value) or None


def as_mapping(value: Any) -> Mapping:
    """Return ``value`` when it is a mapping, else an empty dict."""
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> list:
    """Return ``value`` when it is a list, else an empty list."""
    return value if isinstance(value, list) else []


def is_number(value: Any) -> bool:
    """True for ints and floats; bools are not scores."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_or_none(value: Any) -> int | float | None:
    return value if is_number(value) else None


def int_or_none(value: Any) -> int | None:
    """Integers (and integral floats) pass; anything else is unset."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 instant such as '2026-10-21T23:00:00Z' to aware UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# Sorts unparseable start times after every real one.
MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc)


def instant_sort_key(value: Any) -> datetime:
    parsed = parse_instant(value)
    return parsed if parsed is not None else MAX_INSTANT
