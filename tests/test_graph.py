"""Tests for the knowledge graph builder and relationship index."""

from __future__ import annotations

import pytest

from notesense.graph import (
    RelationshipIndex,
    SimilarityWeights,
    blended_similarity,
    build_graph,
    find_related_notes,
    graph_data,
)


@pytest.fixture()
def corpus(make_note):
    return [
        make_note("Garden plan", "Plant tomatoes and basil in the raised garden beds", ["garden", "home"]),
        make_note("Garden chores", "Water the tomatoes and weed the garden beds", ["garden"]),
        make_note("Quarterly budget", "Finance review of quarterly spending", ["work"]),
        make_note("Budget follow-up", "Quarterly spending review with finance", ["work", "finance"]),
        make_note("Random", "Completely unrelated musings about jazz records"),
    ]


class TestBlendedSimilarity:
    def test_weights_combine_components(self, make_note):
        a = make_note("alpha", "", ["x"])
        b = make_note("alpha", "", ["x"])
        # tags 1.0, vector 1.0, keywords 1.0
        assert blended_similarity(a, b) == pytest.approx(1.0)

    def test_vector_term_needs_both_fingerprints(self, make_note):
        a = make_note("alpha", "", embed=False)
        b = make_note("alpha", "")
        # keywords only
        assert blended_similarity(a, b) == pytest.approx(0.2)

    def test_custom_weights(self, make_note):
        a = make_note("alpha", "", ["x"])
        b = make_note("omega", "", ["x"])
        weights = SimilarityWeights(tags=1.0, vector=0.0, keywords=0.0)
        assert blended_similarity(a, b, weights) == pytest.approx(1.0)


class TestBuildGraph:
    def test_empty_collection(self):
        assert build_graph([]) == []

    def test_edges_meet_threshold_and_point_forward(self, corpus):
        edges = build_graph(corpus)
        order = {n.id: i for i, n in enumerate(corpus)}
        assert edges
        for edge in edges:
            assert edge.strength >= 0.3
            assert order[edge.source_note_id] < order[edge.target_note_id]
            assert edge.type == "semantic"

    def test_related_pairs_are_linked(self, corpus):
        pairs = {(e.source_note_id, e.target_note_id) for e in build_graph(corpus)}
        assert (corpus[0].id, corpus[1].id) in pairs
        assert (corpus[2].id, corpus[3].id) in pairs

    def test_at_most_one_edge_per_pair(self, corpus):
        edges = build_graph(corpus, threshold=0.0)
        keys = [e.key for e in edges]
        assert len(keys) == len(set(keys))
        assert len(edges) == len(corpus) * (len(corpus) - 1) // 2

    def test_idempotent(self, corpus):
        first = build_graph(corpus)
        second = build_graph(corpus)
        assert [e.key for e in first] == [e.key for e in second]
        for a, b in zip(first, second):
            assert a.strength == pytest.approx(b.strength)

    def test_threshold_is_inclusive(self, make_note):
        a = make_note("alpha", "", embed=False)
        b = make_note("alpha", "", embed=False)
        # keyword term only: 0.2
        assert len(build_graph([a, b], threshold=0.2)) == 1
        assert build_graph([a, b], threshold=0.21) == []


class TestFindRelatedNotes:
    def test_excludes_self_and_sorts(self, corpus):
        related = find_related_notes(corpus[0], corpus)
        ids = [r.note.id for r in related]
        assert corpus[0].id not in ids
        strengths = [r.strength for r in related]
        assert strengths == sorted(strengths, reverse=True)
        assert ids[0] == corpus[1].id

    def test_limit(self, corpus):
        assert len(find_related_notes(corpus[0], corpus, limit=1, threshold=0.0)) == 1

    def test_threshold_is_exclusive(self, make_note):
        a = make_note("alpha", "", embed=False)
        b = make_note("alpha", "", embed=False)
        assert find_related_notes(a, [a, b], threshold=0.2) == []
        assert len(find_related_notes(a, [a, b], threshold=0.19)) == 1

    def test_empty_collection(self, make_note):
        assert find_related_notes(make_note("alone"), []) == []


class TestRelationshipIndex:
    def test_upsert_updates_existing_pair(self):
        index = RelationshipIndex()
        index.upsert("a", "b", 0.4)
        updated = index.upsert("a", "b", 0.9, "manual")
        assert len(index) == 1
        assert updated.strength == 0.9
        assert index.get("a", "b").type == "manual"

    def test_pairs_are_ordered(self):
        index = RelationshipIndex()
        index.upsert("a", "b", 0.4)
        index.upsert("b", "a", 0.5)
        assert len(index) == 2

    def test_for_note_lists_outgoing_then_incoming(self):
        index = RelationshipIndex()
        index.upsert("c", "a", 0.3)
        index.upsert("a", "b", 0.4)
        assert [r.key for r in index.for_note("a")] == [("a", "b"), ("c", "a")]

    def test_delete_and_delete_note(self):
        index = RelationshipIndex()
        index.upsert("a", "b", 0.4)
        index.upsert("b", "c", 0.4)
        index.upsert("c", "d", 0.4)
        index.delete("c", "d")
        assert index.get("c", "d") is None
        assert index.delete_note("b") == 2
        assert len(index) == 0

    def test_rebuild_replaces_edges_idempotently(self, corpus):
        index = RelationshipIndex()
        index.upsert("stale", "edge", 1.0)
        first = [(r.key, r.strength) for r in index.rebuild(corpus)]
        second = [(r.key, r.strength) for r in index.rebuild(corpus)]
        assert index.get("stale", "edge") is None
        assert first == second
        assert len(index) == len(build_graph(corpus))


class TestGraphData:
    def test_nodes_and_edges(self, make_note):
        a = make_note("First", "x" * 250, ["t"])
        b = make_note("Second", "")
        index = RelationshipIndex()
        index.upsert(a.id, b.id, 0.5)
        data = graph_data([a, b], index.all())
        assert data["nodes"][0] == {"id": a.id, "label": "First", "tags": ["t"], "size": 2.5}
        assert data["edges"] == [{"source": a.id, "target": b.id, "strength": 0.5}]
