"""
Topic clustering by dominant shared keywords.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .intelligence import extract_keywords
from .models import Cluster, Note

OTHER_LABEL = "Other"


def cluster_by_topic(notes: Sequence[Note], num_clusters: int = 5) -> list[Cluster]:
    """
    Group *notes* around the *num_clusters* most frequent keywords.

    Keyword frequency counts every occurrence across all notes; ties keep
    the order in which keywords were first seen.  A note joins every cluster
    whose seed keyword it contains.  Notes matching no seed are collected in
    a trailing "Other" cluster, which is left out when empty.
    """
    histogram: Counter[str] = Counter()
    note_keywords: list[tuple[Note, set[str]]] = []
    for note in notes:
        keywords = extract_keywords(note.text)
        histogram.update(keywords)
        note_keywords.append((note, set(keywords)))

    seeds = [keyword for keyword, _ in histogram.most_common(max(num_clusters, 0))]

    clusters: list[Cluster] = []
    matched = [False] * len(note_keywords)
    for seed in seeds:
        members = []
        for idx, (note, keywords) in enumerate(note_keywords):
            if seed in keywords:
                members.append(note)
                matched[idx] = True
        if members:
            clusters.append(Cluster(id=len(clusters), label=seed, notes=members))

    unassigned = [note for (note, _), hit in zip(note_keywords, matched) if not hit]
    if unassigned:
        clusters.append(Cluster(id=len(clusters), label=OTHER_LABEL, notes=unassigned))

    return clusters
