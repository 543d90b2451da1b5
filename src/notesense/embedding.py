"""
Fingerprint generation.

A fingerprint is a positional term-frequency vector: entry *i* holds the
document-wide frequency of the *i*-th token of the document's own token
stream, L2-normalised.  There is no shared vocabulary, so two fingerprints
are only comparable insofar as the early token orderings of their documents
line up.  This keeps generation O(document length) with no model and no
corpus index; the similarity it yields is an approximation.

Everything downstream takes an *embedder* (any ``Callable[[str], list[float]]``)
so a vocabulary-indexed implementation can replace :class:`PositionalEmbedder`
without touching search or graph code.
"""

from __future__ import annotations

import math
import time
from collections import Counter
from typing import Callable

from .intelligence import tokenize
from .models import Fingerprint

#: Maximum fingerprint length.
DEFAULT_DIMENSIONS: int = 100

Embedder = Callable[[str], Fingerprint]


def generate_embedding(text: str, dimensions: int = DEFAULT_DIMENSIONS) -> Fingerprint:
    """
    Return the fingerprint of *text*.

    The first *dimensions* tokens (in order, repeats included) each
    contribute their whole-document frequency; the vector is then scaled to
    unit length.  Text with no surviving tokens yields ``[]``.
    """
    tokens = tokenize(text)
    freq = Counter(tokens)
    vector = [float(freq[token]) for token in tokens[:dimensions]]

    magnitude = math.sqrt(sum(v * v for v in vector))
    if magnitude == 0:
        return vector
    return [v / magnitude for v in vector]


def norm(fingerprint: Fingerprint) -> float:
    """Euclidean norm of *fingerprint*."""
    return math.sqrt(sum(v * v for v in fingerprint))


class PositionalEmbedder:
    """
    Callable embedder wrapping :func:`generate_embedding`.

    Parameters
    ----------
    dimensions:
        Maximum fingerprint length.
    latency:
        Seconds to block before each call.  Stands in for the round trip of
        an external scoring service; ``0`` disables it.
    """

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS, latency: float = 0.0) -> None:
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self.dimensions = dimensions
        self.latency = latency

    def __call__(self, text: str) -> Fingerprint:
        if self.latency > 0:
            time.sleep(self.latency)
        return generate_embedding(text, self.dimensions)

    def __repr__(self) -> str:
        return f"PositionalEmbedder(dimensions={self.dimensions}, latency={self.latency})"
