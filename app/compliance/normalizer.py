"""Normalizes raw compliance document records into `NormalizedDocument`.

Normalization is total: malformed dates, unknown enum values and missing fields
degrade to defaults instead of raising.
"""

from collections.abc import Mapping
from typing import Any

from app.compliance.dates import to_date
from app.compliance.models import NormalizedDocument, VerificationStatus

DEFAULT_STATUS = "pending"


def normalize_text(value: Any) -> str:
    """Trimmed, lower-cased string form of any value; None becomes ""."""
    if value is None:
        return ""
    return str(value).strip().lower()


def parse_status(value: Any) -> str:
    """Stored status as a lower-cased token, "pending" when empty."""
    return normalize_text(value) or DEFAULT_STATUS


def parse_verification_status(value: Any) -> VerificationStatus:
    """Coerce free-text verification status into the closed three-value set."""
    text = normalize_text(value)
    if text == VerificationStatus.VERIFIED.value:
        return VerificationStatus.VERIFIED
    if text == VerificationStatus.QUERIED.value:
        return VerificationStatus.QUERIED
    return VerificationStatus.UNVERIFIED


def normalize_document(raw: Mapping[str, Any] | None) -> NormalizedDocument:
    """Convert one raw record into its canonical shape."""
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    status_raw = parse_status(record.get("status"))
    url = _optional_text(record.get("url"))

    return NormalizedDocument(
        participant_id=_optional_text(record.get("participantId")) or "",
        type=_optional_text(record.get("type")) or "",
        status_raw=status_raw,
        verification_status_raw=parse_verification_status(record.get("verificationStatus")),
        has_file=bool(url) and status_raw != "missing",
        expiry=to_date(record.get("expiryDate")),
        issue=to_date(record.get("issueDate")),
        id=_optional_text(record.get("id")),
        beneficiary_name=_optional_text(record.get("beneficiaryName")),
        document_name=_optional_text(record.get("documentName")),
        status_text=_optional_text(record.get("status")),
        verification_status_text=_optional_text(record.get("verificationStatus")),
        url=url,
        notes=_optional_text(record.get("notes")),
        uploaded_by=_optional_text(record.get("uploadedBy")),
        uploaded_at=_optional_text(record.get("uploadedAt")),
        verification_comment=_optional_text(record.get("verificationComment")),
        last_verified_by=_optional_text(record.get("lastVerifiedBy")),
        last_verified_at=_optional_text(record.get("lastVerifiedAt")),
        raw=record,
    )


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else None
