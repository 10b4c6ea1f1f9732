from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from app.compliance.aggregator import (
    aggregate_global_stats,
    build_participant_summary,
    deduplicate_summaries,
    sort_summaries,
)
from app.compliance.dates import to_date, today
from app.compliance.exceptions import (
    ApplicationNotFoundError,
    ComplianceDocumentNotFoundError,
    InvalidComplianceDataError,
    MissingTenantError,
)
from app.compliance.models import (
    ComplianceSnapshot,
    CompositeKey,
    ParticipantComplianceSummary,
    VerificationStatus,
)
from app.compliance.normalizer import normalize_text
from app.compliance.sanitizer import sanitize_for_store
from app.compliance.status_resolver import DEFAULT_EXPIRING_WINDOW_DAYS
from app.database.exceptions import DocumentStoreError
from app.database.models import ApplicationRecord, ParticipantRecord
from app.database.repositories.applications_repository import ApplicationsRepository
from app.database.repositories.participants_repository import ParticipantsRepository
from app.logging.logger import Log

DocumentsUpdater = Callable[[list[Any]], list[Any]]

UNKNOWN_NAME = "Unknown"
UNKNOWN_REVIEWER = "Unknown"

# Sanitizer findings beyond this many are not logged individually
_MAX_LOGGED_ISSUES = 80


class ComplianceService:
    """Loads tenant compliance summaries and applies reviewer decisions.

    Every operation takes the tenant code explicitly. The last successful load per
    tenant is kept; a failed load never replaces it.

    Writes replace the whole embedded document array of an application without a
    revision check, so concurrent reviewers editing the same application race and
    the last write wins.
    """

    def __init__(
        self,
        applications_repo: ApplicationsRepository,
        participants_repo: ParticipantsRepository,
        *,
        expiring_window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
        accepted_status: str = "accepted",
    ) -> None:
        self._applications_repo = applications_repo
        self._participants_repo = participants_repo
        self._expiring_window_days = expiring_window_days
        self._accepted_status = accepted_status
        self._snapshots: dict[str, ComplianceSnapshot] = {}
        self._errors: dict[str, str] = {}

    def snapshot(self, tenant_code: str) -> ComplianceSnapshot | None:
        """Last successfully loaded snapshot for the tenant."""
        return self._snapshots.get(tenant_code)

    def last_error(self, tenant_code: str) -> str | None:
        """Message of the most recent failed load for the tenant, cleared on success."""
        return self._errors.get(tenant_code)

    def load(self, tenant_code: str, now: date | datetime | None = None) -> ComplianceSnapshot:
        """Fetch accepted applications and participants, and build a snapshot.

        Raises:
            MissingTenantError: if tenant_code is empty.
            DocumentStoreError: on any store failure.
        """
        self._require_tenant(tenant_code)
        loaded_at = datetime.now(UTC)
        reference = now if now is not None else today()

        applications = self._applications_repo.list_by_status(tenant_code, self._accepted_status)
        participants = self._participants_repo.find_all()
        Log.info(
            f"Loaded {len(applications)} accepted applications and "
            f"{len(participants)} participants for tenant {tenant_code}"
        )

        built = [
            self._summarize(app, participants.get(app.participant_id), reference)
            for app in applications
        ]
        summaries = sort_summaries(deduplicate_summaries(built))
        return ComplianceSnapshot(
            tenant_code=tenant_code,
            participants=summaries,
            global_stats=aggregate_global_stats(summaries),
            loaded_at=loaded_at,
        )

    def refetch(
        self,
        tenant_code: str,
        now: date | datetime | None = None,
    ) -> ComplianceSnapshot | None:
        """Reload the tenant and return the current snapshot.

        Failures are logged and recorded for `last_error`; the previous snapshot is
        returned untouched.
        """
        try:
            snapshot = self.load(tenant_code, now)
        except Exception as exc:
            Log.exception(f"Failed to load compliance data for tenant {tenant_code!r}: {exc}")
            self._errors[tenant_code] = str(exc) or "Failed to load compliance data"
            return self._snapshots.get(tenant_code)

        self._snapshots[tenant_code] = snapshot
        self._errors.pop(tenant_code, None)
        return snapshot

    def update_document_in_application(
        self,
        tenant_code: str,
        participant_id: str,
        updater: DocumentsUpdater,
        *,
        prune: bool = True,
    ) -> None:
        """Rewrite the compliance documents of the participant's first application.

        The updater receives the current raw document array and returns the new one.

        Raises:
            MissingTenantError: if tenant_code is empty.
            ApplicationNotFoundError: if the participant has no application.
            InvalidComplianceDataError: if prune is False and the new array holds
                values the store cannot represent.
            DocumentStoreError: on any store failure.
        """
        application = self._applications_for(tenant_code, participant_id)[0]
        self._write_documents(
            tenant_code,
            application,
            updater(list(application.compliance_documents)),
            prune=prune,
        )

    def verify_document(
        self,
        tenant_code: str,
        participant_id: str,
        status: VerificationStatus,
        *,
        doc_id: str | None = None,
        composite: CompositeKey | None = None,
        comment: str | None = None,
        reviewer_name: str | None = None,
        now: date | None = None,
    ) -> None:
        """Record a reviewer decision on one compliance document.

        The document is located by `doc_id`, or, for documents stored without an
        ID, by `composite`. A queried document also gets its stored status set to
        "invalid".

        Raises:
            ValueError: if status is not verified or queried.
            MissingTenantError: if tenant_code is empty.
            ApplicationNotFoundError: if the participant has no application.
            ComplianceDocumentNotFoundError: if no document matches.
            DocumentStoreError: on any store failure.
        """
        status = VerificationStatus(status)
        if status is VerificationStatus.UNVERIFIED:
            raise ValueError("A review decision must be 'verified' or 'queried'")
        applications = self._applications_for(tenant_code, participant_id)

        fields: dict[str, Any] = {
            "verificationStatus": status.value,
            "verificationComment": comment or "",
            "lastVerifiedBy": reviewer_name or UNKNOWN_REVIEWER,
            "lastVerifiedAt": (now or today()).isoformat(),
        }
        if status is VerificationStatus.QUERIED:
            fields["status"] = "invalid"

        for application in applications:
            matched = False
            updated: list[Any] = []
            for raw in application.compliance_documents:
                if matches_document(raw, doc_id, composite):
                    matched = True
                    updated.append({**raw, **fields})
                else:
                    updated.append(raw)
            if matched:
                Log.info(
                    f"Recording '{status.value}' review on participant {participant_id}",
                    application_id=application.id,
                    doc_id=doc_id,
                )
                self._write_documents(tenant_code, application, updated, prune=True)
                return

        message = f"Compliance document not found for participant {participant_id}"
        if doc_id:
            message += f" (id={doc_id})"
        Log.warning(message, tenant_code=tenant_code)
        raise ComplianceDocumentNotFoundError(message)

    def _write_documents(
        self,
        tenant_code: str,
        application: ApplicationRecord,
        documents: list[Any],
        *,
        prune: bool,
    ) -> None:
        result = sanitize_for_store(documents)
        if result.issues:
            Log.warning(
                "Invalid compliance document data detected",
                application_id=application.id,
                participant_id=application.participant_id,
                tenant_code=tenant_code,
                issues=[f"{i.path} ({i.reason})" for i in result.issues[:_MAX_LOGGED_ISSUES]],
            )
            if not prune:
                first = result.issues[0]
                raise InvalidComplianceDataError(
                    f"Invalid document data at: {first.path} ({first.reason})"
                )

        try:
            self._applications_repo.replace_compliance_documents(application.id, result.value)
        except DocumentStoreError as exc:
            Log.error(f"Failed to update application {application.id}: {exc}")
            raise
        Log.info(f"Updated compliance documents of application {application.id}")
        self.refetch(tenant_code)

    def _summarize(
        self,
        application: ApplicationRecord,
        participant: ParticipantRecord | None,
        now: date | datetime,
    ) -> ParticipantComplianceSummary:
        beneficiary_name = (
            application.beneficiary_name
            or (participant.beneficiary_name if participant else None)
            or UNKNOWN_NAME
        )
        raw_docs = [
            {
                **(raw if isinstance(raw, Mapping) else {}),
                "participantId": application.participant_id,
                "beneficiaryName": beneficiary_name,
            }
            for raw in application.compliance_documents
        ]
        return build_participant_summary(
            application.participant_id,
            beneficiary_name,
            raw_docs,
            email=participant.email if participant else None,
            phone=participant.phone if participant else None,
            now=now,
            expiring_window_days=self._expiring_window_days,
        )

    def _applications_for(self, tenant_code: str, participant_id: str) -> list[ApplicationRecord]:
        self._require_tenant(tenant_code)
        try:
            applications = self._applications_repo.list_for_participant(tenant_code, participant_id)
        except DocumentStoreError as exc:
            Log.error(f"Failed to load applications of participant {participant_id}: {exc}")
            raise
        if not applications:
            message = (
                f"Application not found for participant {participant_id} in tenant {tenant_code}"
            )
            Log.warning(message)
            raise ApplicationNotFoundError(message)
        return applications

    @staticmethod
    def _require_tenant(tenant_code: str) -> None:
        if not tenant_code:
            raise MissingTenantError("Missing tenant code")


def matches_document(
    raw: Any,
    doc_id: str | None,
    composite: CompositeKey | None,
) -> bool:
    """True if `raw` is the target: same ID, or, when it has no ID, same composite key."""
    if not isinstance(raw, Mapping):
        return False
    raw_id = raw.get("id")
    if doc_id and raw_id:
        return raw_id == doc_id
    if raw_id or composite is None:
        return False
    return (
        normalize_text(raw.get("type")) == normalize_text(composite.type)
        and normalize_text(raw.get("documentName")) == normalize_text(composite.document_name)
        and _same_expiry(raw.get("expiryDate"), composite.expiry_date)
    )


def _same_expiry(stored: Any, wanted: Any) -> bool:
    stored_day, wanted_day = to_date(stored), to_date(wanted)
    if stored_day is not None and wanted_day is not None:
        return stored_day == wanted_day
    return _expiry_key(stored) == _expiry_key(wanted)


def _expiry_key(value: Any) -> str:
    return "" if value is None else str(value).strip()
