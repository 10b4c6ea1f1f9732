from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class EffectiveStatus(str, Enum):
    """Computed compliance state of a document. Never stored, always derived."""

    VALID = "valid"
    EXPIRING = "expiring"
    EXPIRED = "expired"
    MISSING = "missing"
    PENDING = "pending"
    INVALID = "invalid"


class VerificationStatus(str, Enum):
    """A reviewer's judgment of a document, independent of its effective status."""

    VERIFIED = "verified"
    QUERIED = "queried"
    UNVERIFIED = "unverified"


@dataclass(frozen=True)
class NormalizedDocument:
    """Canonical form of a raw compliance document record."""

    participant_id: str
    type: str
    status_raw: str
    verification_status_raw: VerificationStatus
    has_file: bool
    expiry: date | None = None
    issue: date | None = None
    id: str | None = None
    beneficiary_name: str | None = None
    document_name: str | None = None
    status_text: str | None = None
    verification_status_text: str | None = None
    url: str | None = None
    notes: str | None = None
    uploaded_by: str | None = None
    uploaded_at: str | None = None
    verification_comment: str | None = None
    last_verified_by: str | None = None
    last_verified_at: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True)
class EvaluatedDocument:
    """A normalized document together with its resolved effective status."""

    document: NormalizedDocument
    effective_status: EffectiveStatus


@dataclass(frozen=True)
class ComplianceCounts:
    """Per-status and per-verification tallies over a set of documents."""

    total: int = 0
    valid: int = 0
    expiring: int = 0
    expired: int = 0
    missing: int = 0
    pending: int = 0
    invalid: int = 0
    verified: int = 0
    queried: int = 0
    unverified: int = 0

    def status_count(self, status: EffectiveStatus) -> int:
        return int(getattr(self, status.value))

    def verification_count(self, status: VerificationStatus) -> int:
        return int(getattr(self, status.value))


@dataclass(frozen=True)
class ParticipantComplianceSummary:
    participant_id: str
    beneficiary_name: str
    docs: list[EvaluatedDocument]
    counts: ComplianceCounts
    compliance_score: int
    action_needed: bool
    email: str | None = None
    phone: str | None = None
    last_activity_at: str | None = None


@dataclass(frozen=True)
class GlobalComplianceStats:
    total_participants: int
    total_documents: int
    status_counts: dict[EffectiveStatus, int]
    verification_counts: dict[VerificationStatus, int]
    avg_compliance_score: int
    participants_action_needed: int


@dataclass(frozen=True)
class ReminderIssue:
    type: str
    status: EffectiveStatus
    document_name: str | None = None


@dataclass(frozen=True)
class ReminderPayload:
    """One reminder per participant with a contact email and open issues."""

    email: str
    name: str
    issues: list[ReminderIssue]


@dataclass(frozen=True)
class CompositeKey:
    """Identifies a document without a stable ID by its semantic fields.

    Type and name compare trimmed and case-insensitive. Expiry dates compare as
    calendar dates when both sides parse, otherwise as trimmed strings.
    """

    type: str | None = None
    document_name: str | None = None
    expiry_date: Any = None


@dataclass(frozen=True)
class ComplianceSnapshot:
    """Result of one full load for a tenant."""

    tenant_code: str
    participants: list[ParticipantComplianceSummary]
    global_stats: GlobalComplianceStats
    loaded_at: datetime
