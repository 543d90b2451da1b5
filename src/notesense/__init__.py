"""
notesense: a local, model-free intelligence layer for notes.

Turns note text into comparable fingerprints, ranks notes against queries,
infers a relationship graph and topic clusters, extracts tasks from free
text and summarizes daily activity.
"""

from .clustering import cluster_by_topic
from .digest import generate_daily_digest, weekly_summary
from .embedding import PositionalEmbedder, generate_embedding
from .graph import RelationshipIndex, build_graph, find_related_notes
from .manager import NoteManager
from .models import Cluster, DailyActivity, Note, Relationship, Task
from .search import semantic_search
from .similarity import keyword_similarity, tag_similarity, vector_similarity
from .store import NoteNotFoundError, NoteStore
from .tasks import extract_tasks

__all__ = [
    "Cluster",
    "DailyActivity",
    "Note",
    "NoteManager",
    "NoteNotFoundError",
    "NoteStore",
    "PositionalEmbedder",
    "Relationship",
    "RelationshipIndex",
    "Task",
    "build_graph",
    "cluster_by_topic",
    "extract_tasks",
    "find_related_notes",
    "generate_daily_digest",
    "generate_embedding",
    "keyword_similarity",
    "semantic_search",
    "tag_similarity",
    "vector_similarity",
    "weekly_summary",
]
