"""
Configuration for notesense.

Settings come from environment variables, falling back to defaults:

    NOTESENSE_DB_PATH            ChromaDB store path (default: ~/.cache/notesense)
    NOTESENSE_COLLECTION         ChromaDB collection name (default: notes)
    NOTESENSE_DIMENSIONS         maximum fingerprint length (default: 100)
    NOTESENSE_EMBED_LATENCY      seconds of simulated embedding latency (default: 0)
    NOTESENSE_SEARCH_THRESHOLD   minimum search score, exclusive (default: 0.1)
    NOTESENSE_GRAPH_THRESHOLD    minimum edge strength, inclusive (default: 0.3)
    NOTESENSE_RELATED_THRESHOLD  minimum related-note strength, exclusive (default: 0.2)
    NOTESENSE_LOG_LEVEL          logging level name (default: WARNING)
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .embedding import DEFAULT_DIMENSIONS
from .graph import GRAPH_THRESHOLD, RELATED_THRESHOLD
from .search import SEARCH_THRESHOLD

DEFAULT_DB_PATH = str(Path.home() / ".cache" / "notesense")
DEFAULT_COLLECTION = "notes"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    db_path: str = DEFAULT_DB_PATH
    collection: str = DEFAULT_COLLECTION
    dimensions: int = DEFAULT_DIMENSIONS
    embed_latency: float = 0.0
    search_threshold: float = SEARCH_THRESHOLD
    graph_threshold: float = GRAPH_THRESHOLD
    related_threshold: float = RELATED_THRESHOLD
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from *environ* (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        return cls(
            db_path=env.get("NOTESENSE_DB_PATH", DEFAULT_DB_PATH),
            collection=env.get("NOTESENSE_COLLECTION", DEFAULT_COLLECTION),
            dimensions=int(env.get("NOTESENSE_DIMENSIONS", DEFAULT_DIMENSIONS)),
            embed_latency=float(env.get("NOTESENSE_EMBED_LATENCY", 0.0)),
            search_threshold=float(env.get("NOTESENSE_SEARCH_THRESHOLD", SEARCH_THRESHOLD)),
            graph_threshold=float(env.get("NOTESENSE_GRAPH_THRESHOLD", GRAPH_THRESHOLD)),
            related_threshold=float(env.get("NOTESENSE_RELATED_THRESHOLD", RELATED_THRESHOLD)),
            log_level=env.get("NOTESENSE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> None:
    """
    Send the package's log records to stderr at *level*.

    stderr keeps stdout free for CLI output and the MCP stdio transport.
    """
    logger = logging.getLogger("notesense")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(getattr(h, "_notesense", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._notesense = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
