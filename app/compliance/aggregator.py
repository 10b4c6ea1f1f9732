"""Rolls evaluated documents up into participant summaries and global statistics."""

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from app.compliance.dates import to_date, today
from app.compliance.models import (
    ComplianceCounts,
    EffectiveStatus,
    EvaluatedDocument,
    GlobalComplianceStats,
    ParticipantComplianceSummary,
    VerificationStatus,
)
from app.compliance.normalizer import normalize_document
from app.compliance.status_resolver import (
    DEFAULT_EXPIRING_WINDOW_DAYS,
    is_problematic,
    resolve_status,
)


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half away from zero for non-negative operands."""
    return (2 * numerator + denominator) // (2 * denominator)


def evaluate_documents(
    raw_docs: Iterable[Mapping[str, Any] | None],
    now: date | datetime | None = None,
    expiring_window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
) -> list[EvaluatedDocument]:
    """Normalize and resolve every raw document against the same reference time."""
    reference = now if now is not None else today()
    evaluated = []
    for raw in raw_docs:
        doc = normalize_document(raw)
        evaluated.append(
            EvaluatedDocument(
                document=doc,
                effective_status=resolve_status(doc, reference, expiring_window_days),
            )
        )
    return evaluated


def compute_counts(docs: Sequence[EvaluatedDocument]) -> ComplianceCounts:
    statuses: Counter[EffectiveStatus] = Counter()
    verifications: Counter[VerificationStatus] = Counter()
    for evaluated in docs:
        statuses[evaluated.effective_status] += 1
        verifications[evaluated.document.verification_status_raw] += 1

    return ComplianceCounts(
        total=len(docs),
        **{status.value: statuses[status] for status in EffectiveStatus},
        **{status.value: verifications[status] for status in VerificationStatus},
    )


def compute_compliance_score(docs: Sequence[EvaluatedDocument]) -> int:
    """Percentage of documents that are valid or human-verified, 0 for no documents."""
    if not docs:
        return 0
    good = sum(
        1
        for evaluated in docs
        if evaluated.effective_status == EffectiveStatus.VALID
        or evaluated.document.verification_status_raw == VerificationStatus.VERIFIED
    )
    return round_half_up(100 * good, len(docs))


def latest_activity(values: Iterable[str | None]) -> str | None:
    """Latest of the given timestamp strings, compared as dates.

    Unparseable strings rank below parseable ones; ties fall back to string order.
    The original string is returned unchanged.
    """
    candidates = [value for value in values if value]
    if not candidates:
        return None
    return max(candidates, key=_activity_sort_key)


def _activity_sort_key(value: str) -> tuple[bool, date, str]:
    parsed = to_date(value)
    return (parsed is not None, parsed or date.min, value)


def build_participant_summary(
    participant_id: str,
    beneficiary_name: str,
    raw_docs: Iterable[Mapping[str, Any] | None],
    *,
    email: str | None = None,
    phone: str | None = None,
    now: date | datetime | None = None,
    expiring_window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
) -> ParticipantComplianceSummary:
    docs = evaluate_documents(raw_docs, now, expiring_window_days)
    return ParticipantComplianceSummary(
        participant_id=participant_id,
        beneficiary_name=beneficiary_name,
        email=email,
        phone=phone,
        docs=docs,
        counts=compute_counts(docs),
        compliance_score=compute_compliance_score(docs),
        action_needed=any(is_problematic(d.effective_status) for d in docs),
        last_activity_at=latest_activity(
            d.document.last_verified_at or d.document.uploaded_at for d in docs
        ),
    )


def aggregate_global_stats(
    summaries: Sequence[ParticipantComplianceSummary],
) -> GlobalComplianceStats:
    status_counts = {status: 0 for status in EffectiveStatus}
    verification_counts = {status: 0 for status in VerificationStatus}
    total_documents = 0
    score_sum = 0
    action_needed = 0

    for summary in summaries:
        total_documents += summary.counts.total
        score_sum += summary.compliance_score
        if summary.action_needed:
            action_needed += 1
        for status in EffectiveStatus:
            status_counts[status] += summary.counts.status_count(status)
        for verification in VerificationStatus:
            verification_counts[verification] += summary.counts.verification_count(verification)

    return GlobalComplianceStats(
        total_participants=len(summaries),
        total_documents=total_documents,
        status_counts=status_counts,
        verification_counts=verification_counts,
        avg_compliance_score=round_half_up(score_sum, len(summaries)) if summaries else 0,
        participants_action_needed=action_needed,
    )


def merge_counts(first: ComplianceCounts, second: ComplianceCounts) -> ComplianceCounts:
    return ComplianceCounts(
        total=first.total + second.total,
        **{s.value: first.status_count(s) + second.status_count(s) for s in EffectiveStatus},
        **{
            v.value: first.verification_count(v) + second.verification_count(v)
            for v in VerificationStatus
        },
    )


def merge_summaries(
    existing: ParticipantComplianceSummary,
    incoming: ParticipantComplianceSummary,
) -> ParticipantComplianceSummary:
    """Fold a second summary for the same participant into the first.

    Documents are concatenated and counts summed. The score is the rounded mean of
    the two scores, not a recomputation over the merged documents.
    """
    return replace(
        existing,
        docs=[*existing.docs, *incoming.docs],
        counts=merge_counts(existing.counts, incoming.counts),
        compliance_score=round_half_up(
            existing.compliance_score + incoming.compliance_score, 2
        ),
        action_needed=existing.action_needed or incoming.action_needed,
        last_activity_at=latest_activity(
            [existing.last_activity_at, incoming.last_activity_at]
        ),
    )


def deduplicate_summaries(
    summaries: Iterable[ParticipantComplianceSummary],
) -> list[ParticipantComplianceSummary]:
    """Merge summaries sharing a participant ID, keeping first-seen order."""
    merged: dict[str, ParticipantComplianceSummary] = {}
    for summary in summaries:
        existing = merged.get(summary.participant_id)
        merged[summary.participant_id] = (
            summary if existing is None else merge_summaries(existing, summary)
        )
    return list(merged.values())


def sort_summaries(
    summaries: Iterable[ParticipantComplianceSummary],
) -> list[ParticipantComplianceSummary]:
    """Action-needed first, then by descending score, then by name."""
    return sorted(
        summaries,
        key=lambda s: (not s.action_needed, -s.compliance_score, s.beneficiary_name.casefold()),
    )


def filter_summaries(
    summaries: Iterable[ParticipantComplianceSummary],
    search_text: str = "",
    statuses: Iterable[EffectiveStatus] | None = None,
) -> list[ParticipantComplianceSummary]:
    """Narrow summaries by a search term and/or the effective statuses of their documents.

    The search term matches the participant name or any document type,
    case-insensitively. With `statuses`, only participants holding at least one
    document in one of those statuses are kept.
    """
    needle = search_text.strip().casefold()
    wanted = set(statuses) if statuses is not None else None

    result = []
    for summary in summaries:
        if needle and not (
            needle in summary.beneficiary_name.casefold()
            or any(needle in d.document.type.casefold() for d in summary.docs)
        ):
            continue
        if wanted is not None and not any(d.effective_status in wanted for d in summary.docs):
            continue
        result.append(summary)
    return result
