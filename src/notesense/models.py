"""
Plain data records exchanged with the note store and with callers.

Every record converts to the camelCase dictionary shape used at the
storage / UI boundary via ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

#: A fingerprint is an ordered list of non-negative floats.
Fingerprint = list[float]

PRIORITIES = ("high", "medium", "low")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        # Millisecond epochs come from browser-side stores.
        seconds = value / 1000.0 if value > 1e11 else float(value)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return utcnow()


@dataclass
class Note:
    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    embedding: Fingerprint | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def text(self) -> str:
        """Title and content joined the way every comparison reads them."""
        return f"{self.title} {self.content}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "embedding": list(self.embedding) if self.embedding is not None else None,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        embedding = data.get("embedding")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            content=data.get("content") or "",
            tags=list(data.get("tags") or []),
            embedding=[float(x) for x in embedding] if embedding is not None else None,
            created_at=_parse_datetime(data.get("createdAt")),
            updated_at=_parse_datetime(data.get("updatedAt")),
        )


@dataclass
class Relationship:
    source_note_id: str
    target_note_id: str
    strength: float
    type: str = "semantic"

    @property
    def key(self) -> tuple[str, str]:
        return (self.source_note_id, self.target_note_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceNoteId": self.source_note_id,
            "targetNoteId": self.target_note_id,
            "strength": self.strength,
            "type": self.type,
        }


@dataclass
class Task:
    title: str
    note_id: str | None = None
    completed: bool = False
    priority: str = "medium"
    due_date: datetime | None = None
    extracted_from: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "noteId": self.note_id,
            "completed": self.completed,
            "priority": self.priority,
            "dueDate": _iso(self.due_date),
            "extractedFrom": self.extracted_from,
        }


@dataclass
class Cluster:
    id: int
    label: str
    notes: list[Note] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "noteIds": [n.id for n in self.notes],
        }


@dataclass
class DailyActivity:
    date: str
    notes_created: int = 0
    notes_updated: int = 0
    tasks_completed: int = 0
    meetings_recorded: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "notesCreated": self.notes_created,
            "notesUpdated": self.notes_updated,
            "tasksCompleted": self.tasks_completed,
            "meetingsRecorded": self.meetings_recorded,
        }


@dataclass
class SearchResult:
    note: Note
    score: float
    fingerprint: Fingerprint

    def to_dict(self) -> dict[str, Any]:
        data = self.note.to_dict()
        data["embedding"] = list(self.fingerprint)
        data["similarity"] = self.score
        return data


@dataclass
class RelatedNote:
    note: Note
    strength: float

    def to_dict(self) -> dict[str, Any]:
        data = self.note.to_dict()
        data["relationshipStrength"] = self.strength
        return data


@dataclass
class Insight:
    type: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass
class DailyDigest:
    date: str
    activity: DailyActivity
    new_notes: list[Note]
    updated_notes: list[Note]
    completed_tasks: list[Task]
    meetings: list[Note]
    insights: list[Insight]
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "activity": self.activity.to_dict(),
            "newNotes": [n.to_dict() for n in self.new_notes],
            "updatedNotes": [n.to_dict() for n in self.updated_notes],
            "completedTasks": [t.to_dict() for t in self.completed_tasks],
            "meetings": [n.to_dict() for n in self.meetings],
            "insights": [i.to_dict() for i in self.insights],
            "summary": self.summary,
        }


@dataclass
class WeeklySummary:
    period: str
    totals: DailyActivity
    daily_activities: list[DailyActivity]
    average_per_day: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        totals = self.totals.to_dict()
        totals.pop("date")
        return {
            "period": self.period,
            "totals": totals,
            "dailyActivities": [a.to_dict() for a in self.daily_activities],
            "averagePerDay": dict(self.average_per_day),
        }
