from datetime import date, datetime

from app.compliance.dates import today
from app.compliance.models import EffectiveStatus, NormalizedDocument, VerificationStatus

DEFAULT_EXPIRING_WINDOW_DAYS = 30

# Stored status tokens that map straight onto an effective status
_STORED_STATUSES: dict[str, EffectiveStatus] = {
    EffectiveStatus.VALID.value: EffectiveStatus.VALID,
    EffectiveStatus.EXPIRED.value: EffectiveStatus.EXPIRED,
    EffectiveStatus.EXPIRING.value: EffectiveStatus.EXPIRING,
    EffectiveStatus.INVALID.value: EffectiveStatus.INVALID,
    EffectiveStatus.MISSING.value: EffectiveStatus.MISSING,
}


def parse_stored_status(status_raw: str) -> EffectiveStatus | None:
    """Map a normalized stored status to an effective status, None if unrecognized."""
    return _STORED_STATUSES.get(status_raw)


def resolve_status(
    doc: NormalizedDocument,
    now: date | datetime | None = None,
    expiring_window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
) -> EffectiveStatus:
    """Derive a document's effective status. First matching rule wins.

    1. Queried by a reviewer -> invalid, whatever else the record says.
    2. No file, or stored as missing -> missing.
    3. Expiry before today -> expired; within the window -> expiring.
    4. Recognized stored status.
    5. Otherwise pending.

    Expiry comparisons are by calendar day.
    """
    if doc.verification_status_raw == VerificationStatus.QUERIED:
        return EffectiveStatus.INVALID

    if not doc.has_file or doc.status_raw == EffectiveStatus.MISSING.value:
        return EffectiveStatus.MISSING

    if doc.expiry is not None:
        reference_day = _as_date(now)
        if doc.expiry < reference_day:
            return EffectiveStatus.EXPIRED
        if (doc.expiry - reference_day).days <= expiring_window_days:
            return EffectiveStatus.EXPIRING

    return parse_stored_status(doc.status_raw) or EffectiveStatus.PENDING


def is_problematic(status: EffectiveStatus) -> bool:
    """True for every status that needs follow-up, i.e. anything but valid."""
    return status != EffectiveStatus.VALID


def _as_date(value: date | datetime | None) -> date:
    if value is None:
        return today()
    if isinstance(value, datetime):
        return value.date()
    return value
