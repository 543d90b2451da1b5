"""
Shared pytest fixtures for notesense tests.

Uses ChromaDB in ephemeral (in-memory) mode; fingerprints are computed by
the package itself, so no model is ever downloaded.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import chromadb
import pytest

from notesense.embedding import generate_embedding
from notesense.manager import NoteManager
from notesense.models import Note
from notesense.store import NoteStore

# A single shared EphemeralClient instance for the test session.
# Each fixture call creates a uniquely named collection so tests are isolated.
_EPHEMERAL_CLIENT = chromadb.EphemeralClient()

#: Fixed "now" for time-dependent tests.
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def ephemeral_store() -> NoteStore:
    return NoteStore(
        _client=_EPHEMERAL_CLIENT,
        collection_name=f"test_{uuid.uuid4().hex}",
    )


@pytest.fixture()
def note_store() -> NoteStore:
    """In-memory NoteStore on a fresh collection."""
    return ephemeral_store()


@pytest.fixture()
def manager(note_store: NoteStore) -> NoteManager:
    """NoteManager wired to the ephemeral in-memory store."""
    return NoteManager(_store=note_store)


@pytest.fixture()
def make_note():
    """Factory for notes; fingerprints are computed unless ``embed=False``."""
    counter = {"n": 0}

    def _make(
        title: str,
        content: str = "",
        tags: list[str] | None = None,
        embed: bool = True,
        note_id: str | None = None,
        created_at: datetime = NOW,
        updated_at: datetime | None = None,
    ) -> Note:
        counter["n"] += 1
        note = Note(
            id=note_id or f"note-{counter['n']}",
            title=title,
            content=content,
            tags=list(tags or []),
            created_at=created_at,
            updated_at=updated_at or created_at,
        )
        if embed:
            note.embedding = generate_embedding(note.text)
        return note

    return _make
