from collections.abc import Iterable

from app.compliance.models import ParticipantComplianceSummary, ReminderIssue, ReminderPayload
from app.compliance.status_resolver import is_problematic


def build_reminder_payloads(
    summaries: Iterable[ParticipantComplianceSummary],
) -> list[ReminderPayload]:
    """Build one reminder per reachable participant listing every non-valid document.

    Participants without an email address or without open issues are skipped.
    """
    payloads: list[ReminderPayload] = []
    for summary in summaries:
        if not summary.email:
            continue
        issues = [
            ReminderIssue(
                type=d.document.type,
                status=d.effective_status,
                document_name=d.document.document_name,
            )
            for d in summary.docs
            if is_problematic(d.effective_status)
        ]
        if not issues:
            continue
        payloads.append(
            ReminderPayload(
                email=summary.email,
                name=summary.beneficiary_name or summary.email,
                issues=issues,
            )
        )
    return payloads
