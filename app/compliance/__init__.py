from app.compliance.aggregator import aggregate_global_stats, build_participant_summary
from app.compliance.normalizer import normalize_document
from app.compliance.reminders import build_reminder_payloads
from app.compliance.service import ComplianceService
from app.compliance.status_resolver import resolve_status

__all__ = [
    "ComplianceService",
    "aggregate_global_stats",
    "build_participant_summary",
    "build_reminder_payloads",
    "normalize_document",
    "resolve_status",
]
