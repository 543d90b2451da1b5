"""
Note store backed by ChromaDB, caching each note's fingerprint as its
vector.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

import chromadb

from .embedding import DEFAULT_DIMENSIONS, generate_embedding
from .models import Fingerprint, Note

logger = logging.getLogger(__name__)

#: Stored in place of a length when a note has no cached fingerprint.
NO_FINGERPRINT = -1

_INCLUDE = ["documents", "metadatas", "embeddings"]


class NoteNotFoundError(KeyError):
    """Raised when a note id is not in the store."""


def pad(fingerprint: Fingerprint | None, dimensions: int) -> list[float]:
    """
    Zero-pad *fingerprint* to *dimensions* entries.

    Padding leaves dot products unchanged, which is all similarity needs.
    """
    values = list(fingerprint or [])
    if len(values) > dimensions:
        raise ValueError(
            f"fingerprint has {len(values)} dimensions, store holds at most {dimensions}"
        )
    return values + [0.0] * (dimensions - len(values))


class FingerprintEmbeddingFunction:
    """
    ChromaDB embedding function producing padded positional fingerprints.

    Keeps ChromaDB from loading its default model.  The store always passes
    vectors explicitly; this only serves text queries made directly against
    the collection.
    """

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS) -> None:
        self.dimensions = dimensions

    def name(self) -> str:  # required by ChromaDB >= 0.5
        return "notesense-positional-fingerprint"

    def _embed(self, texts: list[str]) -> list[list[float]]:
        return [pad(generate_embedding(t, self.dimensions), self.dimensions) for t in texts]

    def __call__(self, input: list[str]) -> list[list[float]]:  # noqa: A002
        return self._embed(input)

    def embed_documents(self, input: list[str]) -> list[list[float]]:  # noqa: A002
        return self._embed(input)

    def embed_query(self, input: list[str]) -> list[list[float]]:  # noqa: A002
        return self._embed(input)


class NoteStore:
    """
    Persistent note store backed by ChromaDB.

    Each record's document is the note content; title, tags and timestamps
    live in metadata.  The cached fingerprint is the record's vector,
    zero-padded to *dimensions*, with its true length kept in metadata so it
    reads back unchanged (up to ChromaDB's float32 precision).
    """

    def __init__(
        self,
        path: str = "./notesense_db",
        collection_name: str = "notes",
        dimensions: int = DEFAULT_DIMENSIONS,
        _client: chromadb.ClientAPI | None = None,
    ) -> None:
        self.dimensions = dimensions
        self.client = _client or chromadb.PersistentClient(path=path)
        self.collection = self.client.get_or_create_collection(
            name=collection_name,
            embedding_function=FingerprintEmbeddingFunction(dimensions),
            metadata={"hnsw:space": "cosine"},
        )

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def save(self, note: Note) -> None:
        """Insert *note* or overwrite the stored note with the same id."""
        self.collection.upsert(
            ids=[note.id],
            documents=[note.content],
            embeddings=[pad(note.embedding, self.dimensions)],
            metadatas=[self._metadata(note)],
        )
        logger.debug("saved note %s", note.id)

    def delete(self, note_id: str) -> None:
        """Delete a note by id."""
        self.collection.delete(ids=[note_id])

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get(self, note_id: str) -> Note:
        """Fetch one note; raise :class:`NoteNotFoundError` if it is missing."""
        result = self.collection.get(ids=[note_id], include=_INCLUDE)
        notes = self._to_notes(result)
        if not notes:
            raise NoteNotFoundError(note_id)
        return notes[0]

    def get_all(self) -> list[Note]:
        """Every stored note, oldest first."""
        notes = self._to_notes(self.collection.get(include=_INCLUDE))
        notes.sort(key=lambda n: (n.created_at, n.id))
        return notes

    def count(self) -> int:
        """Return the number of stored notes."""
        return self.collection.count()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _metadata(note: Note) -> dict[str, Any]:
        return {
            "title": note.title,
            "tags": json.dumps(list(note.tags)),
            "created_at": note.created_at.timestamp(),
            "updated_at": note.updated_at.timestamp(),
            "fingerprint_length": (
                len(note.embedding) if note.embedding is not None else NO_FINGERPRINT
            ),
        }

    @staticmethod
    def _to_notes(result: dict) -> list[Note]:
        ids = result.get("ids") or []
        documents = result.get("documents")
        metadatas = result.get("metadatas")
        embeddings = result.get("embeddings")

        notes: list[Note] = []
        for i, note_id in enumerate(ids):
            meta = metadatas[i] if metadatas is not None else {}
            meta = meta or {}
            length = int(meta.get("fingerprint_length", NO_FINGERPRINT))
            fingerprint = None
            if length != NO_FINGERPRINT and embeddings is not None:
                fingerprint = [float(x) for x in embeddings[i][:length]]

            notes.append(
                Note(
                    id=note_id,
                    title=str(meta.get("title", "")),
                    content=(documents[i] if documents is not None else None) or "",
                    tags=json.loads(meta.get("tags") or "[]"),
                    embedding=fingerprint,
                    created_at=datetime.fromtimestamp(float(meta.get("created_at", 0)), tz=timezone.utc),
                    updated_at=datetime.fromtimestamp(float(meta.get("updated_at", 0)), tz=timezone.utc),
                )
            )
        return notes
