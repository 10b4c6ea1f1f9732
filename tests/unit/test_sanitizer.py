import math
from dataclasses import dataclass
from datetime import date, datetime

from app.compliance.models import VerificationStatus
from app.compliance.sanitizer import SanitizeIssue, sanitize_for_store


@dataclass
class _Attachment:
    name: str
    size: int


class _Stamp:
    def to_datetime(self) -> datetime:
        return datetime(2024, 1, 2, 3, 4, 5)


class _CamelCaseStamp:
    def toDate(self) -> datetime:  # noqa: N802
        return datetime(2025, 6, 30, 8, 0)


class _BrokenStamp:
    def to_datetime(self) -> datetime:
        raise ValueError("corrupt timestamp")


class TestCleanValues:
    def test_plain_json_passes_through(self) -> None:
        docs = [{"type": "Tax", "tags": ["a", "b"], "size": 2, "ratio": 0.5, "ok": True, "x": None}]
        result = sanitize_for_store(docs)
        assert result.value == docs
        assert result.issues == []

    def test_datetimes_and_enums_are_converted_silently(self) -> None:
        result = sanitize_for_store(
            {
                "at": datetime(2024, 1, 1, 9, 30),
                "status": VerificationStatus.QUERIED,
                "stamp": _Stamp(),
            }
        )
        assert result.value == {
            "at": "2024-01-01T09:30:00",
            "status": "queried",
            "stamp": "2024-01-02T03:04:05",
        }
        assert result.issues == []

    def test_tuples_become_lists(self) -> None:
        assert sanitize_for_store({"pair": (1, 2)}).value == {"pair": [1, 2]}

    def test_camel_case_timestamp_wrapper_is_kept(self) -> None:
        result = sanitize_for_store([{"type": "Tax", "expiryDate": _CamelCaseStamp()}])
        assert result.value == [{"type": "Tax", "expiryDate": "2025-06-30T08:00:00"}]
        assert result.issues == []


class TestOffendingValues:
    def test_failing_timestamp_wrapper_is_dropped(self) -> None:
        result = sanitize_for_store([{"type": "Tax", "expiryDate": _BrokenStamp()}])
        assert result.value == [{"type": "Tax"}]
        assert result.issues == [
            SanitizeIssue("[0].expiryDate", "unreadable timestamp (_BrokenStamp)")
        ]

    def test_non_finite_numbers_become_null(self) -> None:
        result = sanitize_for_store([{"score": math.nan}])
        assert result.value == [{"score": None}]
        assert result.issues == [SanitizeIssue("[0].score", "non-finite number")]

    def test_date_objects_are_formatted(self) -> None:
        result = sanitize_for_store([{"expiryDate": date(2024, 12, 31)}])
        assert result.value == [{"expiryDate": "2024-12-31"}]
        assert result.issues == [SanitizeIssue("[0].expiryDate", "date object")]

    def test_functions_are_dropped(self) -> None:
        result = sanitize_for_store([{"type": "Tax", "hook": len}, print])
        assert result.value == [{"type": "Tax"}]
        assert [i.path for i in result.issues] == ["[0].hook", "[1]"]
        assert all(i.reason == "function" for i in result.issues)

    def test_dataclasses_are_flattened(self) -> None:
        result = sanitize_for_store({"file": _Attachment("a.pdf", 10)})
        assert result.value == {"file": {"name": "a.pdf", "size": 10}}
        assert result.issues == [SanitizeIssue("file", "non-plain object (_Attachment)")]

    def test_unsupported_objects_are_dropped(self) -> None:
        result = sanitize_for_store({"blob": b"\x00", "keep": 1})
        assert result.value == {"keep": 1}
        assert result.issues == [SanitizeIssue("blob", "unsupported type (bytes)")]

    def test_non_string_keys_are_stringified(self) -> None:
        result = sanitize_for_store({1: "one"})
        assert result.value == {"1": "one"}
        assert len(result.issues) == 1
