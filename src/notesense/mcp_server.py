"""
MCP (Model Context Protocol) server for notesense.

Exposes the NoteManager as a set of tools so an assistant can store notes,
search them, explore their relationships and pull tasks and digests.

Run as a stdio server:
    python -m notesense.mcp_server

Or via the installed entry-point:
    notesense-mcp

Configuration comes from the NOTESENSE_* environment variables read by
:class:`notesense.config.Settings`.
"""

from __future__ import annotations

import json
from datetime import date

from mcp.server.fastmcp import FastMCP

from .config import Settings, configure_logging
from .manager import NoteManager
from .store import NoteNotFoundError

# Lazy-initialised singleton so the store is only opened once.
_manager: NoteManager | None = None


def _get_manager() -> NoteManager:
    global _manager
    if _manager is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        _manager = NoteManager(settings=settings)
    return _manager


def _parse_day(day: str | None) -> date | None:
    return date.fromisoformat(day) if day else None


# ---------------------------------------------------------------------------
# FastMCP server
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "notesense",
    instructions=(
        "Local note intelligence. "
        "Use `add_note` to store a note, `search_notes` to find notes about a topic "
        "and `related_notes` to explore what a note connects to. "
        "Use `build_graph` and `cluster_notes` for an overview of the collection, "
        "`extract_tasks` to pull action items out of text, `summarize_note` and "
        "`suggest_tags` for a single note, and `daily_digest` / "
        "`weekly_summary` for activity reports."
    ),
)


@mcp.tool()
def add_note(title: str, content: str, tags: list[str] | None = None) -> str:
    """
    Store a new note.

    Args:
        title:   Short note title.
        content: Note body as plain text.
        tags:    Optional list of tags.

    Returns:
        A confirmation message with the new note's ID.
    """
    note = _get_manager().add_note(title, content, tags=tags)
    return f"Stored note {note.id}."


@mcp.tool()
def list_notes(limit: int = 50) -> str:
    """
    List stored notes, oldest first.

    Args:
        limit: Maximum number of notes to return (default 50).

    Returns:
        JSON array of notes (without fingerprints).
    """
    notes = _get_manager().list_notes(limit=limit)
    if not notes:
        return "No notes stored."
    simplified = []
    for note in notes:
        data = note.to_dict()
        data.pop("embedding")
        simplified.append(data)
    return json.dumps(simplified, indent=2)


@mcp.tool()
def delete_note(note_id: str) -> str:
    """
    Delete a note and its relationships.

    Args:
        note_id: The ID of the note to delete.

    Returns:
        A confirmation or error message.
    """
    try:
        _get_manager().delete_note(note_id)
    except NoteNotFoundError:
        return f"Note {note_id} not found."
    return f"Deleted note {note_id}."


@mcp.tool()
def count_notes() -> str:
    """Return the total number of stored notes."""
    n = _get_manager().count()
    return f"{n} {'note' if n == 1 else 'notes'} stored."


@mcp.tool()
def search_notes(query: str, limit: int = 10) -> str:
    """
    Rank stored notes against a free-text query.

    Args:
        query: Words describing what to look for.
        limit: Maximum number of results (default 10).

    Returns:
        JSON array of matches with id, title, similarity and a content preview.
    """
    results = _get_manager().search(query)[:limit]
    if not results:
        return "No matching notes found."
    simplified = [
        {
            "id": r.note.id,
            "title": r.note.title,
            "similarity": round(r.score, 4),
            "preview": r.note.content[:200],
        }
        for r in results
    ]
    return json.dumps(simplified, indent=2)


@mcp.tool()
def related_notes(note_id: str, limit: int = 5) -> str:
    """
    Find the notes most related to a note (tags, text and keywords combined).

    Args:
        note_id: The ID of the note to start from.
        limit:   Maximum number of related notes (default 5).

    Returns:
        JSON array of related notes with id, title and relationship strength.
    """
    try:
        related = _get_manager().related(note_id, limit=limit)
    except NoteNotFoundError:
        return f"Note {note_id} not found."
    if not related:
        return "No related notes found."
    simplified = [
        {"id": r.note.id, "title": r.note.title, "strength": round(r.strength, 4)}
        for r in related
    ]
    return json.dumps(simplified, indent=2)


@mcp.tool()
def build_graph(threshold: float | None = None) -> str:
    """
    Rebuild the relationship graph over all notes.

    Args:
        threshold: Minimum edge strength (default from configuration, 0.3).

    Returns:
        JSON object with ``nodes`` and ``edges``.
    """
    manager = _get_manager()
    manager.build_graph(threshold=threshold)
    return json.dumps(manager.graph_data(), indent=2)


@mcp.tool()
def cluster_notes(num_clusters: int = 5) -> str:
    """
    Group notes around their most frequent keywords.

    Args:
        num_clusters: Number of keyword topics to seed (default 5).

    Returns:
        JSON array of clusters with id, label and member note IDs.
    """
    clusters = _get_manager().clusters(num_clusters=num_clusters)
    if not clusters:
        return "No notes stored."
    return json.dumps([c.to_dict() for c in clusters], indent=2)


@mcp.tool()
def extract_tasks(text: str | None = None, note_id: str | None = None) -> str:
    """
    Extract action items from text or from a stored note.

    Args:
        text:    Free text to scan.
        note_id: Scan this stored note instead of *text*.

    Returns:
        JSON array of tasks with title, priority, completion and due date.
    """
    if text is None and note_id is None:
        return "Provide either text or note_id."
    try:
        tasks = _get_manager().extract_tasks(text=text, note_id=note_id)
    except NoteNotFoundError:
        return f"Note {note_id} not found."
    if not tasks:
        return "No tasks found."
    return json.dumps([t.to_dict() for t in tasks], indent=2)


@mcp.tool()
def summarize_note(note_id: str, max_length: int = 200) -> str:
    """
    Extractive summary of a stored note.

    Args:
        note_id:    The ID of the note to summarize.
        max_length: Approximate summary length in characters (default 200).

    Returns:
        The summary text, or an error message.
    """
    try:
        return _get_manager().summarize(note_id, max_length=max_length)
    except NoteNotFoundError:
        return f"Note {note_id} not found."


@mcp.tool()
def suggest_tags(note_id: str, limit: int = 3) -> str:
    """
    Suggest tags for a stored note from its most frequent long words.

    Args:
        note_id: The ID of the note.
        limit:   Maximum number of suggestions (default 3).

    Returns:
        JSON array of suggested tags the note does not already carry.
    """
    try:
        tags = _get_manager().suggest_tags(note_id, limit=limit)
    except NoteNotFoundError:
        return f"Note {note_id} not found."
    if not tags:
        return "No new tags to suggest."
    return json.dumps(tags)


@mcp.tool()
def daily_digest(day: str | None = None) -> str:
    """
    Summarize one day of note activity.

    Args:
        day: ISO date (YYYY-MM-DD); defaults to today (UTC).

    Returns:
        JSON digest with activity counters, insights and a summary.
    """
    try:
        parsed = _parse_day(day)
    except ValueError:
        return f"Invalid date {day!r}; expected YYYY-MM-DD."
    digest = _get_manager().daily_digest(parsed)
    return json.dumps(digest.to_dict(), indent=2)


@mcp.tool()
def weekly_summary(day: str | None = None) -> str:
    """
    Summarize the seven days ending at a date.

    Args:
        day: ISO date (YYYY-MM-DD) of the last day; defaults to today (UTC).

    Returns:
        JSON summary with totals and per-day averages.
    """
    try:
        parsed = _parse_day(day)
    except ValueError:
        return f"Invalid date {day!r}; expected YYYY-MM-DD."
    summary = _get_manager().weekly_summary(parsed)
    return json.dumps(summary.to_dict(), indent=2)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server over stdio."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
