"""Tests for fingerprint generation."""

from __future__ import annotations

import time

import pytest

from notesense.embedding import (
    DEFAULT_DIMENSIONS,
    PositionalEmbedder,
    generate_embedding,
    norm,
)


class TestGenerateEmbedding:
    @pytest.mark.parametrize(
        "text",
        [
            "Hello world.",
            "The quick brown fox jumps over the lazy dog.",
            "meeting meeting notes about the quarterly roadmap",
            "word " * 300,
        ],
    )
    def test_non_empty_text_is_unit_normalized(self, text):
        assert norm(generate_embedding(text)) == pytest.approx(1.0)

    def test_all_filtered_text_is_degenerate(self):
        assert generate_embedding("a an to of") == []
        assert generate_embedding("") == []

    def test_entries_are_document_frequencies_in_token_order(self):
        # tokens: beta alpha beta gamma -> freqs 2, 1, 2, 1
        vec = generate_embedding("beta alpha beta gamma")
        scale = (2 * 2 + 1 + 2 * 2 + 1) ** 0.5
        assert vec == pytest.approx([2 / scale, 1 / scale, 2 / scale, 1 / scale])

    def test_window_is_truncated_to_dimensions(self):
        text = " ".join(f"tok{i}" for i in range(250))
        assert len(generate_embedding(text)) == DEFAULT_DIMENSIONS
        assert len(generate_embedding(text, dimensions=10)) == 10

    def test_frequency_counts_the_whole_document(self):
        # "late" repeats only after the window, but still weighs in.
        vec = generate_embedding("late early late", dimensions=2)
        assert vec == pytest.approx([2 / 5 ** 0.5, 1 / 5 ** 0.5])

    def test_entries_are_non_negative(self):
        assert all(v >= 0 for v in generate_embedding("some ordinary sentence here"))

    def test_non_string_fails_fast(self):
        with pytest.raises(TypeError):
            generate_embedding(["not", "text"])  # type: ignore[arg-type]


class TestPositionalEmbedder:
    def test_matches_function(self):
        embedder = PositionalEmbedder(dimensions=5)
        text = "one two three four five six seven"
        assert embedder(text) == generate_embedding(text, 5)

    def test_rejects_non_positive_dimensions(self):
        with pytest.raises(ValueError):
            PositionalEmbedder(dimensions=0)

    def test_latency_blocks(self):
        embedder = PositionalEmbedder(latency=0.05)
        start = time.monotonic()
        embedder("some text here")
        assert time.monotonic() - start >= 0.04
