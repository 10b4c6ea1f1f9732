from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StoredDocument:
    """A record of a document store collection: identifier plus JSON body."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ApplicationRecord:
    """Typed view of an `applications` record."""

    id: str
    participant_id: str
    tenant_code: str
    application_status: str
    beneficiary_name: str | None = None
    compliance_documents: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class ParticipantRecord:
    """Typed view of a `participants` record."""

    id: str
    beneficiary_name: str | None = None
    email: str | None = None
    phone: str | None = None
