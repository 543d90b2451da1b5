"""
Daily and weekly activity digests.

The aggregation functions here only count and narrate.  Picking which notes
and tasks belong to a day is the caller's job; :func:`select_day` offers the
usual rules for callers that hold the whole note collection.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from .models import DailyActivity, DailyDigest, Insight, Note, Task, WeeklySummary
from .tasks import extract_from_notes

MAX_NEW_NOTES = 5
MAX_UPDATED_NOTES = 5
MAX_COMPLETED_TASKS = 10
MEETING_TAG = "meeting"

NO_ACTIVITY_MESSAGE = (
    "You haven't recorded any activity today yet. "
    "Start by creating a note or completing a task!"
)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _day_key(day: date | str) -> str:
    return day if isinstance(day, str) else day.isoformat()


# ---------------------------------------------------------------------------
# Day selection
# ---------------------------------------------------------------------------


@dataclass
class DaySelection:
    """Notes and tasks attributed to one calendar day (UTC)."""

    activity: DailyActivity
    new_notes: list[Note] = field(default_factory=list)
    updated_notes: list[Note] = field(default_factory=list)
    completed_tasks: list[Task] = field(default_factory=list)
    meetings: list[Note] = field(default_factory=list)


def select_day(
    day: date,
    notes: Iterable[Note],
    tasks: Iterable[Task] | None = None,
) -> DaySelection:
    """
    Pick the notes and tasks belonging to *day* and count them.

    New notes were created that day; updated notes were touched that day but
    created earlier; meetings are new notes tagged ``meeting``.  Without an
    explicit *tasks* list, completed tasks are read from the checkboxes of the
    notes created that day (a checkbox in an older note carries
    no record of when it was ticked).
    """
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1)

    new_notes: list[Note] = []
    updated_notes: list[Note] = []
    for note in notes:
        if start <= note.created_at < end:
            new_notes.append(note)
        elif start <= note.updated_at < end and note.created_at < start:
            updated_notes.append(note)

    if tasks is None:
        tasks = extract_from_notes(new_notes)
    completed = [t for t in tasks if t.completed]
    meetings = [n for n in new_notes if MEETING_TAG in n.tags]

    activity = DailyActivity(
        date=day.isoformat(),
        notes_created=len(new_notes),
        notes_updated=len(updated_notes),
        tasks_completed=len(completed),
        meetings_recorded=len(meetings),
    )
    return DaySelection(activity, new_notes, updated_notes, completed, meetings)


# ---------------------------------------------------------------------------
# Daily digest
# ---------------------------------------------------------------------------


def generate_insights(
    notes: Sequence[Note],
    tasks: Sequence[Task],
    meetings: Sequence[Note],
) -> list[Insight]:
    """Qualitative observations about a day's new notes, completed tasks and meetings."""
    insights: list[Insight] = []

    total = len(notes) + len(tasks)
    if total > 10:
        insights.append(
            Insight(
                "productivity",
                f"🚀 Highly productive day! You created {len(notes)} notes "
                f"and completed {len(tasks)} tasks.",
            )
        )
    elif total > 5:
        insights.append(Insight("productivity", f"✅ Good progress today with {total} total actions."))

    tag_counts = Counter(tag for note in notes for tag in note.tags)
    top = tag_counts.most_common(3)
    if top:
        topics = ", ".join(f"{tag} ({count})" for tag, count in top)
        insights.append(Insight("topics", f"📊 Top topics today: {topics}"))

    if meetings:
        insights.append(Insight("meetings", f"🗓️ You recorded {_plural(len(meetings), 'meeting')} today."))

    if tasks:
        insights.append(Insight("tasks", f"✨ Completed {_plural(len(tasks), 'task')} today!"))

    return insights


def generate_summary(activity: DailyActivity) -> str:
    """One-paragraph narrative of a day's counters."""
    if activity.notes_created == 0 and activity.tasks_completed == 0:
        return NO_ACTIVITY_MESSAGE

    parts = ["Today you were productive!"]
    if activity.notes_created > 0:
        parts.append(f"Created {_plural(activity.notes_created, 'new note')}.")
    if activity.notes_updated > 0:
        parts.append(f"Updated {_plural(activity.notes_updated, 'existing note')}.")
    if activity.tasks_completed > 0:
        parts.append(f"Completed {_plural(activity.tasks_completed, 'task')}.")
    if activity.meetings_recorded > 0:
        parts.append(f"Recorded {_plural(activity.meetings_recorded, 'meeting')}.")
    return " ".join(parts)


def generate_daily_digest(
    day: date | str,
    activity: DailyActivity | None = None,
    new_notes: Sequence[Note] = (),
    updated_notes: Sequence[Note] = (),
    completed_tasks: Sequence[Task] = (),
    meetings: Sequence[Note] = (),
) -> DailyDigest:
    """
    Compose the digest for *day* from its counters and the caller's
    selection of notes and tasks.

    Insights look at the full lists; the digest itself keeps at most five
    new notes, five updated notes and ten completed tasks.
    """
    key = _day_key(day)
    activity = activity or DailyActivity(date=key)
    return DailyDigest(
        date=key,
        activity=activity,
        new_notes=list(new_notes[:MAX_NEW_NOTES]),
        updated_notes=list(updated_notes[:MAX_UPDATED_NOTES]),
        completed_tasks=list(completed_tasks[:MAX_COMPLETED_TASKS]),
        meetings=list(meetings),
        insights=generate_insights(new_notes, completed_tasks, meetings),
        summary=generate_summary(activity),
    )


# ---------------------------------------------------------------------------
# Weekly summary
# ---------------------------------------------------------------------------


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weekly_summary(activities: Iterable[DailyActivity], days: int = 7) -> WeeklySummary:
    """
    Total the most recent *days* daily records and average them per day.

    The averages always divide by *days*, so missing dates count as idle.
    """
    recent = sorted(activities, key=lambda a: a.date)[-days:]

    totals = DailyActivity(date=recent[-1].date if recent else "")
    for day in recent:
        totals.notes_created += day.notes_created
        totals.notes_updated += day.notes_updated
        totals.tasks_completed += day.tasks_completed
        totals.meetings_recorded += day.meetings_recorded

    return WeeklySummary(
        period=f"Last {days} days",
        totals=totals,
        daily_activities=recent,
        average_per_day={
            "notes": _round_half_up((totals.notes_created + totals.notes_updated) / days),
            "tasks": _round_half_up(totals.tasks_completed / days),
        },
    )
