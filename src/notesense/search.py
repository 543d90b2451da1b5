"""
Semantic search over a caller-supplied note collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .embedding import Embedder, generate_embedding
from .models import Note, SearchResult
from .similarity import vector_similarity

logger = logging.getLogger(__name__)

#: Results must score strictly above this value to be returned.
SEARCH_THRESHOLD: float = 0.1


def semantic_search(
    query: str,
    notes: Iterable[Note],
    threshold: float = SEARCH_THRESHOLD,
    embedder: Embedder | None = None,
) -> list[SearchResult]:
    """
    Rank *notes* against *query*.

    Each note is scored with its cached fingerprint when it has one,
    otherwise with a fingerprint computed from its title and content.  Notes
    scoring at or below *threshold* are dropped; the rest are sorted by
    descending score, ties keeping input order.  Every result carries the
    fingerprint it was scored with so callers can cache fresh ones.
    """
    embed = embedder or generate_embedding
    query_embedding = embed(query)

    results: list[SearchResult] = []
    scanned = 0
    for note in notes:
        scanned += 1
        fingerprint = note.embedding if note.embedding is not None else embed(note.text)
        score = vector_similarity(query_embedding, fingerprint)
        if score > threshold:
            results.append(SearchResult(note=note, score=score, fingerprint=fingerprint))

    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug("search %r: %d of %d notes above %.2f", query, len(results), scanned, threshold)
    return results
