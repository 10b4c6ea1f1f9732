import sys

from app.compliance.models import ComplianceSnapshot
from app.compliance.reminders import build_reminder_payloads
from app.compliance.service import ComplianceService
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.applications_repository import ApplicationsRepository
from app.database.repositories.base import BaseDocumentStore
from app.database.repositories.participants_repository import ParticipantsRepository
from app.database.repositories.postgres_document_store import PostgresDocumentStore
from app.logging.logger import Log
from app.notifications.factory import ReminderNotifierFactory


def build_service(settings: Settings, store: BaseDocumentStore) -> ComplianceService:
    """Wire repositories over the document store into a ComplianceService."""
    return ComplianceService(
        ApplicationsRepository(store),
        ParticipantsRepository(store),
        expiring_window_days=settings.expiring_window_days,
        accepted_status=settings.accepted_application_status,
    )


def log_report(snapshot: ComplianceSnapshot) -> None:
    stats = snapshot.global_stats
    statuses = ", ".join(f"{s.value}={n}" for s, n in stats.status_counts.items())
    Log.info(
        f"Tenant {snapshot.tenant_code}: {stats.total_participants} participants, "
        f"{stats.total_documents} documents, average score {stats.avg_compliance_score}, "
        f"{stats.participants_action_needed} need action ({statuses})"
    )


def main() -> int:
    """Entry point: settings -> pool -> load tenant compliance -> report -> reminders."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        store = PostgresDocumentStore()
        store.ensure_schema()
        service = build_service(settings, store)

        snapshot = service.refetch(settings.tenant_code)
        if snapshot is None:
            Log.error(f"No compliance data available: {service.last_error(settings.tenant_code)}")
            return 1
        log_report(snapshot)

        if settings.send_reminders:
            notifier = ReminderNotifierFactory.create(settings)
            sent = notifier.send(build_reminder_payloads(snapshot.participants))
            Log.info(f"Sent {sent} compliance reminders")
        return 0
    finally:
        close_pool()


if __name__ == "__main__":
    sys.exit(main())
