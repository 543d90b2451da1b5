"""
Knowledge graph: pairwise note comparison producing weighted edges.

Every build is a full O(n²) recomputation over the notes handed in; nothing
is maintained incrementally.  Edges are only as good as the fingerprints
cached on the notes, so callers should refresh those first.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .models import Note, RelatedNote, Relationship
from .similarity import keyword_similarity, tag_similarity, vector_similarity

logger = logging.getLogger(__name__)

#: Minimum blended similarity for ``build_graph`` to emit an edge.
GRAPH_THRESHOLD: float = 0.3

#: ``find_related_notes`` keeps scores strictly above this value.
RELATED_THRESHOLD: float = 0.2

DEFAULT_RELATIONSHIP_TYPE = "semantic"


@dataclass(frozen=True)
class SimilarityWeights:
    """Weights of the blended similarity.  Uncalibrated; kept for parity."""

    tags: float = 0.3
    vector: float = 0.5
    keywords: float = 0.2


DEFAULT_WEIGHTS = SimilarityWeights()


def blended_similarity(
    a: Note,
    b: Note,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Weighted blend of tag Dice, fingerprint similarity and keyword Jaccard.

    The fingerprint term is 0 unless both notes carry a cached fingerprint.
    """
    tags = tag_similarity(a.tags, b.tags)
    vector = 0.0
    if a.embedding is not None and b.embedding is not None:
        vector = vector_similarity(a.embedding, b.embedding)
    keywords = keyword_similarity(a.text, b.text)
    return tags * weights.tags + vector * weights.vector + keywords * weights.keywords


def build_graph(
    notes: Sequence[Note],
    threshold: float = GRAPH_THRESHOLD,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
) -> list[Relationship]:
    """
    Compare every unordered pair of *notes* and return an edge for each pair
    whose blended similarity reaches *threshold*.

    Edges point from the earlier note to the later one in *notes* order, so
    the same input always yields the same edge list.
    """
    relationships: list[Relationship] = []
    for i, source in enumerate(notes):
        for target in notes[i + 1:]:
            strength = blended_similarity(source, target, weights)
            if strength >= threshold:
                relationships.append(
                    Relationship(
                        source_note_id=source.id,
                        target_note_id=target.id,
                        strength=strength,
                        type=DEFAULT_RELATIONSHIP_TYPE,
                    )
                )

    logger.debug("built graph: %d notes, %d edges", len(notes), len(relationships))
    return relationships


def find_related_notes(
    note: Note,
    notes: Iterable[Note],
    limit: int = 5,
    threshold: float = RELATED_THRESHOLD,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
) -> list[RelatedNote]:
    """Return up to *limit* notes most similar to *note*, strongest first."""
    related: list[RelatedNote] = []
    for other in notes:
        if other.id == note.id:
            continue
        strength = blended_similarity(note, other, weights)
        if strength > threshold:
            related.append(RelatedNote(note=other, strength=strength))

    related.sort(key=lambda r: r.strength, reverse=True)
    return related[:limit]


def graph_data(notes: Iterable[Note], relationships: Iterable[Relationship]) -> dict[str, Any]:
    """Nodes and edges in the shape graph visualizations consume."""
    nodes = [
        {
            "id": note.id,
            "label": note.title,
            "tags": list(note.tags),
            "size": len(note.content or "") / 100,
        }
        for note in notes
    ]
    edges = [
        {
            "source": rel.source_note_id,
            "target": rel.target_note_id,
            "strength": rel.strength,
        }
        for rel in relationships
    ]
    return {"nodes": nodes, "edges": edges}


class RelationshipIndex:
    """
    Edge set keyed by ordered (source, target) pair.

    Holds at most one edge per ordered pair: upserting a pair that already
    exists replaces its strength and type in place.
    """

    def __init__(self) -> None:
        self._edges: dict[tuple[str, str], Relationship] = {}

    def upsert(
        self,
        source_note_id: str,
        target_note_id: str,
        strength: float,
        type: str = DEFAULT_RELATIONSHIP_TYPE,  # noqa: A002
    ) -> Relationship:
        key = (source_note_id, target_note_id)
        existing = self._edges.get(key)
        if existing is not None:
            existing.strength = strength
            existing.type = type
            return existing
        rel = Relationship(source_note_id, target_note_id, strength, type)
        self._edges[key] = rel
        return rel

    def get(self, source_note_id: str, target_note_id: str) -> Relationship | None:
        return self._edges.get((source_note_id, target_note_id))

    def for_note(self, note_id: str) -> list[Relationship]:
        """Outgoing edges of *note_id*, then incoming ones."""
        outgoing = [r for r in self._edges.values() if r.source_note_id == note_id]
        incoming = [r for r in self._edges.values() if r.target_note_id == note_id]
        return outgoing + incoming

    def all(self) -> list[Relationship]:
        return list(self._edges.values())

    def delete(self, source_note_id: str, target_note_id: str) -> None:
        self._edges.pop((source_note_id, target_note_id), None)

    def delete_note(self, note_id: str) -> int:
        """Drop every edge touching *note_id*; return how many were removed."""
        doomed = [k for k in self._edges if note_id in k]
        for key in doomed:
            del self._edges[key]
        return len(doomed)

    def clear(self) -> None:
        self._edges.clear()

    def rebuild(
        self,
        notes: Sequence[Note],
        threshold: float = GRAPH_THRESHOLD,
        weights: SimilarityWeights = DEFAULT_WEIGHTS,
    ) -> list[Relationship]:
        """Replace the whole edge set with a fresh :func:`build_graph` result."""
        self.clear()
        for rel in build_graph(notes, threshold, weights):
            self.upsert(rel.source_note_id, rel.target_note_id, rel.strength, rel.type)
        return self.all()

    def __len__(self) -> int:
        return len(self._edges)
