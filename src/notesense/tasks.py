"""
Task extraction: turn free-text lines into task records.

Each line is tested against an ordered table of line rules (checkboxes,
TODO markers, modal phrases, imperative verbs); the first rule that matches
wins.  The extracted text is then scanned for priority markers and relative
due dates, both of which are removed from the final title.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .models import Note, Task, utcnow

logger = logging.getLogger(__name__)

#: Lines shorter than this (after trimming) are never tasks.
MIN_LINE_LENGTH: int = 5

_MODALS = r"Need to|Must|Should|Will|Have to|Don't forget to"
_VERBS = r"Call|Email|Send|Schedule|Book|Buy|Fix|Update|Review|Complete|Finish|Start|Begin"


# ---------------------------------------------------------------------------
# Line rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineRule:
    """A line pattern plus how to read (task text, completed) from its match."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], tuple[str, bool]]


def _checkbox(match: re.Match[str]) -> tuple[str, bool]:
    return match.group(2), match.group(1).lower() == "x"


def _open_task(match: re.Match[str]) -> tuple[str, bool]:
    return match.group(1), False


LINE_RULES: tuple[LineRule, ...] = (
    # - [ ] task / - [x] task
    LineRule("checkbox", re.compile(r"^[\s-]*\[([x ])\]\s+(.+)$", re.I), _checkbox),
    # TODO: task / TO-DO task / TASK: task
    LineRule("marker", re.compile(r"^[\s-]*(?:TODO|TO-DO|TASK)[\s:]+(.+)$", re.I), _open_task),
    # Need to task / Must task (the modal phrase is dropped)
    LineRule("modal", re.compile(rf"^[\s-]*(?:{_MODALS})\s+(.+)$", re.I), _open_task),
    # Call Bob / Email the team (the verb is dropped)
    LineRule("imperative", re.compile(rf"^[\s-]*(?:{_VERBS})\s+(.+)$", re.I), _open_task),
)


# ---------------------------------------------------------------------------
# Metadata: priority and due date
# ---------------------------------------------------------------------------

#: Evaluated top to bottom; the first family present sets the priority and
#: every marker of that family is removed from the title.
PRIORITY_MARKERS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("high", re.compile(r"!{3,}|urgent|critical|asap", re.I)),
    ("medium", re.compile(r"!{2}|important", re.I)),
    ("low", re.compile(r"!|low priority|when possible", re.I)),
)

DEFAULT_PRIORITY = "medium"


def _explicit_date_days(match: re.Match[str], now: datetime) -> int | None:
    """Whole days (rounded up) from *now* until an M/D[/Y] date, or None if invalid."""
    parts = [int(p) for p in re.split(r"[/-]", match.group(1))]
    month, day = parts[0], parts[1]
    year = parts[2] if len(parts) > 2 else now.year
    if year < 100:
        year += 2000
    try:
        target = datetime(year, month, day, tzinfo=now.tzinfo or timezone.utc)
    except ValueError:
        return None
    return math.ceil((target - now).total_seconds() / 86400)


DUE_DATE_RULES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str], datetime], int | None]], ...] = (
    (re.compile(r"\b(today|tomorrow)\b", re.I), lambda m, now: 0 if m.group(1).lower() == "today" else 1),
    (re.compile(r"\bnext week\b", re.I), lambda m, now: 7),
    (re.compile(r"\bnext month\b", re.I), lambda m, now: 30),
    (re.compile(r"\bin (\d+) days?\b", re.I), lambda m, now: int(m.group(1))),
    (
        re.compile(r"\b(?:by|before|due)\s+(\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?)\b", re.I),
        _explicit_date_days,
    ),
)


def extract_metadata(
    text: str,
    now: datetime | None = None,
) -> tuple[str, datetime | None, str]:
    """
    Infer priority and due date from *text*.

    Returns ``(priority, due_date, clean_title)`` where *clean_title* is
    *text* with the matched markers, the due-date phrase and trailing
    sentence punctuation removed.
    """
    now = now or utcnow()
    clean = text
    priority = DEFAULT_PRIORITY

    for level, pattern in PRIORITY_MARKERS:
        if pattern.search(text):
            priority = level
            clean = pattern.sub("", clean).strip()
            break

    due_date: datetime | None = None
    for pattern, days in DUE_DATE_RULES:
        match = pattern.search(text)
        if match:
            offset = days(match, now)
            if offset is not None:
                due_date = now + timedelta(days=offset)
                clean = pattern.sub("", clean, count=1).strip()
            break

    clean = re.sub(r"[.!]+$", "", clean).strip()
    return priority, due_date, " ".join(clean.split())


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_tasks(
    text: str,
    note_id: str | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """
    Extract tasks from *text*, one per matching line.

    Tasks are deduplicated case-insensitively on their cleaned title; the
    first occurrence is kept.
    """
    if not isinstance(text, str):
        raise TypeError(f"expected text as str, got {type(text).__name__}")
    now = now or utcnow()

    tasks: list[Task] = []
    for line in text.splitlines():
        trimmed = line.strip()
        if len(trimmed) < MIN_LINE_LENGTH:
            continue

        for rule in LINE_RULES:
            match = rule.pattern.match(trimmed)
            if not match:
                continue
            task_text, completed = rule.extract(match)
            task_text = task_text.strip()
            if len(task_text) > 2:
                priority, due_date, title = extract_metadata(task_text, now)
                if title:
                    tasks.append(
                        Task(
                            title=title,
                            note_id=note_id,
                            completed=completed,
                            priority=priority,
                            due_date=due_date,
                            extracted_from=trimmed,
                        )
                    )
            break

    unique = deduplicate_tasks(tasks)
    logger.debug("extracted %d tasks (%d before dedup) from note %s", len(unique), len(tasks), note_id)
    return unique


def deduplicate_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Drop tasks whose title (case-insensitive) was already seen."""
    seen: set[str] = set()
    unique: list[Task] = []
    for task in tasks:
        key = task.title.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(task)
    return unique


def extract_from_notes(notes: Iterable[Note], now: datetime | None = None) -> list[Task]:
    """Extract tasks from the content of every note, tagging each with its note id."""
    tasks: list[Task] = []
    for note in notes:
        tasks.extend(extract_tasks(note.content, note.id, now))
    return tasks
