"""Submission analytics over a form's stored responses."""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from models.analytics import SubmissionSummary, TimeRange
from models.form import CHOICE_FIELD_TYPES, FormDefinition, FormSubmission

logger = logging.getLogger(__name__)

DAY_FORMAT = "%Y-%m-%d"


def parse_submitted_at(value: str) -> datetime | None:
    """Parse an ISO timestamp; naive timestamps are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def summarize_submissions(
    definition: FormDefinition,
    submissions: Iterable[FormSubmission],
    time_range: TimeRange | str = TimeRange.WEEK,
    now: datetime | None = None,
) -> SubmissionSummary:
    """Summarize submissions for the analytics view.

    The window runs from time_range days before now up to now. Today and
    this-week counts look at every submission regardless of the window.
    Day keys and the today check use the timezone of now.

    Args:
        definition: Form the submissions belong to
        submissions: Submissions to count
        time_range: Reporting window (week, month or year)
        now: Reference time, defaults to the current UTC time

    Returns:
        SubmissionSummary with counts and the choice distribution
    """
    time_range = TimeRange(time_range)
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    window_start = now - timedelta(days=time_range.days)
    week_start = now - timedelta(days=7)

    in_window: list[FormSubmission] = []
    by_day: Counter[str] = Counter()
    today = 0
    this_week = 0
    skipped = 0

    for submission in submissions:
        submitted_at = parse_submitted_at(submission.submitted_at)
        if submitted_at is None:
            logger.warning(
                "Skipping submission %s with unreadable timestamp %r",
                submission.id,
                submission.submitted_at,
            )
            skipped += 1
            continue

        local = submitted_at.astimezone(now.tzinfo)
        if local.date() == now.date():
            today += 1
        if submitted_at >= week_start:
            this_week += 1
        if window_start <= submitted_at <= now:
            in_window.append(submission)
            by_day[local.strftime(DAY_FORMAT)] += 1

    return SubmissionSummary(
        time_range=time_range,
        total_submissions=len(in_window),
        submissions_today=today,
        submissions_this_week=this_week,
        submissions_by_day=dict(sorted(by_day.items())),
        response_distribution=response_distribution(definition, in_window),
        skipped=skipped,
    )


def response_distribution(
    definition: FormDefinition, submissions: Iterable[FormSubmission]
) -> dict[str, dict[str, int]]:
    """Count chosen options per select, radio and checkbox field.

    List answers count once per chosen item. Every choice field gets an
    entry, empty when nobody answered it.
    """
    choice_fields = [e for e in definition.elements if e.type in CHOICE_FIELD_TYPES]
    counts: dict[str, Counter[str]] = {f.id: Counter() for f in choice_fields}

    for submission in submissions:
        for field in choice_fields:
            answer = submission.responses.get(field.id)
            if isinstance(answer, (list, tuple)):
                counts[field.id].update(str(item) for item in answer)
            elif answer not in (None, "", False):
                counts[field.id][str(answer)] += 1

    return {field_id: dict(counter) for field_id, counter in counts.items()}
