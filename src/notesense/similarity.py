"""
Similarity primitives.  All are pure and return a value in (or near) [0, 1].
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .intelligence import extract_keywords


def vector_similarity(a: Sequence[float] | None, b: Sequence[float] | None) -> float:
    """
    Dot product of two fingerprints over the shorter length.

    Both inputs are expected to be unit-normalised already, which makes the
    dot product equal to the cosine.  ``None`` or empty inputs score 0.
    """
    if not a or not b:
        return 0.0
    return float(sum(x * y for x, y in zip(a, b)))


def tag_similarity(a: Iterable[str], b: Iterable[str]) -> float:
    """Dice coefficient of two tag collections; 0 when either is empty."""
    set_a, set_b = set(a), set(b)
    if not set_a or not set_b:
        return 0.0
    return 2 * len(set_a & set_b) / (len(set_a) + len(set_b))


def keyword_similarity(text_a: str, text_b: str) -> float:
    """Jaccard index of the keyword sets of two texts; 0 when both are empty."""
    set_a = set(extract_keywords(text_a))
    set_b = set(extract_keywords(text_b))
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)
