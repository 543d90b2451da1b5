"""
NoteManager: high-level API tying the note store to the intelligence core.

This is the main entry-point for applications: it keeps fingerprints in
sync with note text, and runs search, graph, clustering, task and digest
operations over the stored notes.

Usage example::

    from notesense import NoteManager

    manager = NoteManager(db_path="./my_notes")

    note = manager.add_note("Quarterly planning", "Review the roadmap.", tags=["work"])
    for result in manager.search("roadmap review"):
        print(result.note.title, result.score)
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Sequence

from . import intelligence
from .clustering import cluster_by_topic
from .config import Settings
from .digest import generate_daily_digest, select_day, weekly_summary
from .embedding import Embedder, PositionalEmbedder
from .graph import RelationshipIndex, find_related_notes, graph_data
from .models import (
    Cluster,
    DailyActivity,
    DailyDigest,
    Note,
    RelatedNote,
    Relationship,
    SearchResult,
    Task,
    WeeklySummary,
    utcnow,
)
from .search import semantic_search
from .store import NoteStore
from .tasks import extract_tasks

logger = logging.getLogger(__name__)


class NoteManager:
    """
    Note intelligence over a local ChromaDB note store.

    Responsibilities
    ----------------
    * **Store** – Adds and updates notes, regenerating the cached
      fingerprint whenever title or content changes.
    * **Relate** – Ranks notes against a query, finds a note's nearest
      neighbours, and rebuilds the relationship graph and topic clusters
      from scratch over every stored note.
    * **Summarize** – Extracts tasks, summaries and tag suggestions from
      note text, and derives daily and weekly activity digests from note
      timestamps.

    Parameters
    ----------
    db_path:
        Filesystem path for the ChromaDB persistent store.
    collection_name:
        Name of the ChromaDB collection to use.
    settings:
        Thresholds, fingerprint size and embedding latency.  Defaults to
        :class:`~notesense.config.Settings` defaults.
    embedder:
        Fingerprint function; defaults to a :class:`PositionalEmbedder`
        built from *settings*.
    """

    def __init__(
        self,
        db_path: str | None = None,
        collection_name: str | None = None,
        settings: Settings | None = None,
        embedder: Embedder | None = None,
        _store: NoteStore | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._store = _store or NoteStore(
            path=db_path or self.settings.db_path,
            collection_name=collection_name or self.settings.collection,
            dimensions=self.settings.dimensions,
        )
        self.embedder = embedder or PositionalEmbedder(
            dimensions=self.settings.dimensions,
            latency=self.settings.embed_latency,
        )
        self.relationships = RelationshipIndex()

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def add_note(
        self,
        title: str,
        content: str,
        tags: Sequence[str] | None = None,
        created_at: datetime | None = None,
    ) -> Note:
        """Create, fingerprint and store a new note."""
        now = created_at or utcnow()
        note = Note(
            id=intelligence.generate_id(),
            title=title,
            content=content,
            tags=list(tags or []),
            created_at=now,
            updated_at=now,
        )
        self.refresh_fingerprint(note)
        self._store.save(note)
        logger.info("added note %s (%r)", note.id, note.title)
        return note

    def update_note(
        self,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
        tags: Sequence[str] | None = None,
        updated_at: datetime | None = None,
    ) -> Note:
        """
        Apply changes to a stored note.

        The fingerprint is regenerated only when title or content actually
        changed; tag edits keep the cached one.
        """
        note = self._store.get(note_id)
        text_changed = False
        if title is not None and title != note.title:
            note.title = title
            text_changed = True
        if content is not None and content != note.content:
            note.content = content
            text_changed = True
        if tags is not None:
            note.tags = list(tags)
        note.updated_at = updated_at or utcnow()

        if text_changed or note.embedding is None:
            self.refresh_fingerprint(note)
        self._store.save(note)
        logger.info("updated note %s (fingerprint %s)", note.id, "regenerated" if text_changed else "kept")
        return note

    def refresh_fingerprint(self, note: Note) -> Note:
        """Recompute *note*'s fingerprint from its current title and content."""
        note.embedding = self.embedder(note.text)
        return note

    def get_note(self, note_id: str) -> Note:
        return self._store.get(note_id)

    def list_notes(self, limit: int | None = None) -> list[Note]:
        notes = self._store.get_all()
        return notes if limit is None else notes[:limit]

    def delete_note(self, note_id: str) -> None:
        """Delete a note and every relationship touching it."""
        self._store.get(note_id)
        self._store.delete(note_id)
        dropped = self.relationships.delete_note(note_id)
        logger.info("deleted note %s and %d relationships", note_id, dropped)

    def count(self) -> int:
        return self._store.count()

    # ------------------------------------------------------------------
    # Search and graph
    # ------------------------------------------------------------------

    def search(self, query: str, threshold: float | None = None) -> list[SearchResult]:
        """
        Rank stored notes against *query*.

        Notes scored with a freshly computed fingerprint get it cached back
        into the store.
        """
        notes = self._store.get_all()
        results = semantic_search(
            query,
            notes,
            threshold=self.settings.search_threshold if threshold is None else threshold,
            embedder=self.embedder,
        )
        for result in results:
            if result.note.embedding is None:
                result.note.embedding = result.fingerprint
                self._store.save(result.note)
        return results

    def _fingerprinted_notes(self) -> list[Note]:
        notes = self._store.get_all()
        for note in notes:
            if note.embedding is None:
                self.refresh_fingerprint(note)
                self._store.save(note)
        return notes

    def related(self, note_id: str, limit: int = 5) -> list[RelatedNote]:
        """Notes most similar to *note_id* by blended similarity."""
        notes = self._fingerprinted_notes()
        target = next((n for n in notes if n.id == note_id), None)
        if target is None:
            target = self._store.get(note_id)
        return find_related_notes(
            target,
            notes,
            limit=limit,
            threshold=self.settings.related_threshold,
        )

    def build_graph(self, threshold: float | None = None) -> list[Relationship]:
        """Rebuild the relationship index over every stored note."""
        notes = self._fingerprinted_notes()
        edges = self.relationships.rebuild(
            notes,
            threshold=self.settings.graph_threshold if threshold is None else threshold,
        )
        logger.info("rebuilt graph over %d notes: %d relationships", len(notes), len(edges))
        return edges

    def graph_data(self) -> dict:
        """Visualization payload for the current relationship index."""
        return graph_data(self._store.get_all(), self.relationships.all())

    def clusters(self, num_clusters: int = 5) -> list[Cluster]:
        return cluster_by_topic(self._store.get_all(), num_clusters)

    # ------------------------------------------------------------------
    # Text helpers
    # ------------------------------------------------------------------

    def summarize(self, note_id: str, max_length: int = intelligence.DEFAULT_SUMMARY_LENGTH) -> str:
        """Extractive summary of a stored note's content."""
        return intelligence.summarize(self._store.get(note_id).content, max_length)

    def suggest_tags(self, note_id: str, limit: int = 3) -> list[str]:
        """Tags suggested from a stored note's most frequent long words, minus the ones it has."""
        note = self._store.get(note_id)
        return [t for t in intelligence.suggest_tags(note.title, note.content, limit) if t not in note.tags]

    # ------------------------------------------------------------------
    # Tasks and digests
    # ------------------------------------------------------------------

    def extract_tasks(self, text: str | None = None, note_id: str | None = None) -> list[Task]:
        """Extract tasks from *text*, or from the stored note *note_id*."""
        if text is None:
            if note_id is None:
                raise ValueError("either text or note_id is required")
            text = self._store.get(note_id).content
        return extract_tasks(text, note_id)

    def activity(self, day: date) -> DailyActivity:
        return select_day(day, self._store.get_all()).activity

    def daily_digest(self, day: date | None = None) -> DailyDigest:
        """Digest of *day* (UTC, default today) derived from stored notes."""
        day = day or datetime.now(timezone.utc).date()
        selection = select_day(day, self._store.get_all())
        return generate_daily_digest(
            day,
            selection.activity,
            new_notes=selection.new_notes,
            updated_notes=selection.updated_notes,
            completed_tasks=selection.completed_tasks,
            meetings=selection.meetings,
        )

    def weekly_summary(self, end_day: date | None = None) -> WeeklySummary:
        """Summary of the seven days ending at *end_day* (UTC, default today)."""
        end_day = end_day or datetime.now(timezone.utc).date()
        notes = self._store.get_all()
        activities = [
            select_day(end_day - timedelta(days=offset), notes).activity
            for offset in range(6, -1, -1)
        ]
        return weekly_summary(activities)
