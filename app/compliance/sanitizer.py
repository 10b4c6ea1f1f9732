"""Makes compliance document arrays safe to write into a JSON document store.

Walks the value tree, converting or dropping anything JSON cannot represent and
recording the path and reason of each offending value.
"""

import dataclasses
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from app.compliance.dates import is_timestamp_wrapper, wrapper_isoformat

_DROP = object()


@dataclass(frozen=True)
class SanitizeIssue:
    path: str
    reason: str


@dataclass(frozen=True)
class SanitizeResult:
    value: Any
    issues: list[SanitizeIssue] = field(default_factory=list)


def sanitize_for_store(value: Any) -> SanitizeResult:
    issues: list[SanitizeIssue] = []
    sanitized = _walk(value, "", issues)
    return SanitizeResult(value=None if sanitized is _DROP else sanitized, issues=issues)


def _walk(value: Any, path: str, issues: list[SanitizeIssue]) -> Any:
    if isinstance(value, Enum):
        return _walk(value.value, path, issues)

    if value is None or isinstance(value, (bool, str, int)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            issues.append(SanitizeIssue(path, "non-finite number"))
            return None
        return value

    if isinstance(value, datetime):
        return value.isoformat()

    if isinstance(value, date):
        issues.append(SanitizeIssue(path, "date object"))
        return value.isoformat()

    if is_timestamp_wrapper(value):
        converted = wrapper_isoformat(value)
        if converted is None:
            issues.append(SanitizeIssue(path, f"unreadable timestamp ({type(value).__name__})"))
            return _DROP
        return converted

    if callable(value):
        issues.append(SanitizeIssue(path, "function"))
        return _DROP

    if isinstance(value, (list, tuple)):
        items = (_walk(item, f"{path}[{i}]", issues) for i, item in enumerate(value))
        return [item for item in items if item is not _DROP]

    if isinstance(value, Mapping):
        return _walk_mapping(value, path, issues)

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        issues.append(SanitizeIssue(path, f"non-plain object ({type(value).__name__})"))
        return _walk_mapping(dataclasses.asdict(value), path, issues)

    issues.append(SanitizeIssue(path, f"unsupported type ({type(value).__name__})"))
    return _DROP


def _walk_mapping(value: Mapping[Any, Any], path: str, issues: list[SanitizeIssue]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.append(SanitizeIssue(path, f"non-string key ({key!r})"))
            key = str(key)
        child = _walk(item, f"{path}.{key}" if path else key, issues)
        if child is not _DROP:
            out[key] = child
    return out
