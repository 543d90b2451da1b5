"""
Text layer: tokenization, keyword extraction and light text analysis.

These utilities sit underneath every comparison in the package:
  - Tokenization into the embedding profile (tokens longer than 2 chars)
  - Keyword extraction into the topic profile (longer than 3 chars, no stop words)
  - Extractive summaries and topic / tag suggestions for a single note
"""

from __future__ import annotations

import re
import uuid
from collections import Counter

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Words ignored by the keyword profile.  Short words are already dropped by
#: the length filter, the rest are listed here.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "can", "this", "that", "these", "those", "i",
        "you", "he", "she", "it", "we", "they", "what", "which", "who", "when",
        "where", "why", "how", "not", "no", "yes",
    }
)

#: Minimum token length (exclusive) for the embedding profile.
EMBEDDING_MIN_LENGTH: int = 2

#: Minimum token length (exclusive) for the keyword profile.
KEYWORD_MIN_LENGTH: int = 3

#: Minimum word length (exclusive) for topic suggestions.
TOPIC_MIN_LENGTH: int = 4

#: Default character budget for extractive summaries.
DEFAULT_SUMMARY_LENGTH: int = 200

_PUNCTUATION = re.compile(r"[^\w\s]")


# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------


def _normalize(text: str) -> list[str]:
    if not isinstance(text, str):
        raise TypeError(f"expected text as str, got {type(text).__name__}")
    return _PUNCTUATION.sub(" ", text.lower()).split()


def tokenize(text: str) -> list[str]:
    """
    Lowercase *text*, strip punctuation and return the tokens longer than
    two characters, in document order.
    """
    return [t for t in _normalize(text) if len(t) > EMBEDDING_MIN_LENGTH]


def extract_keywords(text: str) -> list[str]:
    """
    Return the keyword tokens of *text* in document order (duplicates kept).

    Same normalization as :func:`tokenize`, but only tokens longer than three
    characters that are not stop words survive.
    """
    return [
        t
        for t in _normalize(text)
        if len(t) > KEYWORD_MIN_LENGTH and t not in STOP_WORDS
    ]


# ---------------------------------------------------------------------------
# Summaries and topics
# ---------------------------------------------------------------------------


def _split_sentences(text: str) -> list[str]:
    """Sentences are runs ending in '.', '!' or '?'; unterminated tails are dropped."""
    return [s.strip() for s in re.findall(r"[^.!?]+[.!?]+", text) if s.strip()]


def summarize(text: str, max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
    """
    Build an extractive summary of *text* of roughly *max_length* characters.

    Sentences are ranked by how many words longer than four characters they
    contain and appended best-first until the budget is spent.  Texts of two
    sentences or fewer are returned unchanged.
    """
    sentences = _split_sentences(text) or [text]
    if len(sentences) <= 2:
        return text

    ranked = sorted(
        sentences,
        key=lambda s: sum(1 for w in s.lower().split() if len(w) > 4),
        reverse=True,
    )

    parts: list[str] = []
    size = 0
    for sentence in ranked:
        if size + len(sentence) > max_length and parts:
            break
        parts.append(sentence)
        size += len(sentence)

    return " ".join(parts) or sentences[0]


def extract_topics(text: str, limit: int = 5) -> list[str]:
    """Return the *limit* most frequent words longer than four characters."""
    words = [w for w in _normalize(text) if len(w) > TOPIC_MIN_LENGTH]
    return [word for word, _ in Counter(words).most_common(limit)]


def suggest_tags(title: str, content: str, limit: int = 3) -> list[str]:
    """Suggest up to *limit* tags for a note from its most frequent topics."""
    return extract_topics(f"{title} {content}")[:limit]


# ---------------------------------------------------------------------------
# ID generation
# ---------------------------------------------------------------------------


def generate_id() -> str:
    """Return a new unique note ID."""
    return str(uuid.uuid4())
