"""Parsing and formatting helpers shared by the endpoint modules."""

from __future__ import annotations

import re
from datetime import datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable
from urllib.parse import urlencode

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>[Zz]|[+-]\d{2}:\d{2})$"
)
_HHMM = re.compile(r"^\d{2}:\d{2}$")


def parse_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    The API reports nanosecond precision; digits past microseconds are dropped.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected timestamp string, got {value!r}")
    match = _RFC3339.match(value)
    if match is None:
        raise ValueError(f"invalid RFC 3339 timestamp: {value!r}")
    frac = (match.group("frac") or "")[:6].ljust(6, "0")
    tz = match.group("tz")
    tz = "+00:00" if tz in ("Z", "z") else tz
    parsed = datetime.fromisoformat(f"{match.group('base').replace(' ', 'T')}.{frac}{tz}")
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"cannot serialize naive datetime {value.isoformat()}")
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_hhmm(value: Any) -> time:
    """Parse a strict `HH:MM` time of day (seconds are rejected)."""
    if not isinstance(value, str) or not _HHMM.match(value):
        raise ValueError(f"invalid value {value!r}, expected a time stamp string in format %H:%M")
    return datetime.strptime(value, "%H:%M").time()


def expect_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def expect_uint(value: Any) -> int:
    """Accept a non-negative JSON integer; fractions and booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an unsigned integer, got {value!r}")
    if value < 0:
        raise ValueError(f"expected an unsigned integer, got {value}")
    return value


def expect_decimal(value: Any) -> Decimal:
    """Accept a JSON number or numeric string as a finite `Decimal`."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise TypeError(f"expected a number, got {value!r}")
    number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    if not number.is_finite():
        raise ValueError(f"expected a finite number, got {value!r}")
    return number


def list_or_empty(value: Any) -> list:
    """Treat a JSON `null` list as empty."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return value


def encode_query(params: Iterable[tuple[str, Any]]) -> str:
    """URL-encode `(name, value)` pairs, leaving out `None` values."""
    pairs = []
    for name, value in params:
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, bool):
            value = "true" if value else "false"
        pairs.append((name, value))
    return urlencode(pairs)
