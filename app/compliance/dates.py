"""Conversion of loosely typed date values into calendar dates.

Store records carry dates as ISO strings, formatted strings, epoch milliseconds,
native date objects, exported timestamp mappings or timestamp wrapper objects.
`to_date` is the single conversion point; it never raises.
"""

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TimestampLike(Protocol):
    """Timestamp wrapper exposing a conversion to a native datetime."""

    def to_datetime(self) -> datetime: ...


DateLike = date | datetime | str | int | float | TimestampLike | Mapping[str, Any] | None

# Tried in order after ISO-8601 parsing fails
_DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
]

# Method names used by timestamp wrapper objects from various SDKs
_TIMESTAMP_METHODS = ("to_datetime", "toDate", "ToDatetime")


def to_date(value: Any) -> date | None:
    """Resolve a date-like value to a calendar date, or None if it cannot be read."""
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_string(value)
    if isinstance(value, (int, float)):
        return _from_epoch_millis(value)
    if isinstance(value, Mapping):
        return _from_timestamp_mapping(value)
    return unwrap_timestamp(value)


def today() -> date:
    """Local calendar date used wherever no reference time is given."""
    return date.today()


def is_timestamp_wrapper(value: Any) -> bool:
    """True for objects exposing one of the known timestamp conversion methods."""
    return any(callable(getattr(value, name, None)) for name in _TIMESTAMP_METHODS)


def unwrap_timestamp(value: Any) -> date | None:
    """Calendar date of a timestamp wrapper object, None if it is not one or cannot convert."""
    converted = _convert_wrapper(value)
    return to_date(converted) if converted is not None else None


def wrapper_isoformat(value: Any) -> str | None:
    """ISO string of a timestamp wrapper's native value, None if it cannot convert."""
    converted = _convert_wrapper(value)
    return converted.isoformat() if converted is not None else None


def _convert_wrapper(value: Any) -> date | datetime | None:
    for method_name in _TIMESTAMP_METHODS:
        method = getattr(value, method_name, None)
        if callable(method):
            try:
                converted = method()
            except Exception:
                return None
            return converted if isinstance(converted, (date, datetime)) else None
    return None


def _parse_string(value: str) -> date | None:
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _from_epoch_millis(value: float) -> date | None:
    if not math.isfinite(value):
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=UTC).date()
    except (OverflowError, OSError, ValueError):
        return None


def _from_timestamp_mapping(value: Mapping[str, Any]) -> date | None:
    seconds = value.get("seconds", value.get("_seconds"))
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    return _from_epoch_millis(seconds * 1000)
