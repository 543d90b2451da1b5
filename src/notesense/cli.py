"""
Command-line interface for notesense.

Sub-commands
------------
add          – Store a new note.
list         – List stored notes.
delete       – Delete a note by its ID.
count        – Print the number of stored notes.
search       – Rank notes against a query.
related      – Show the notes most related to a note.
graph        – Rebuild and print the relationship graph.
clusters     – Group notes by topic.
tasks        – Extract tasks from text or from a stored note.
summarize    – Print an extractive summary of a note.
suggest-tags – Suggest tags for a note.
digest       – Print the daily digest.
weekly       – Print the seven-day summary.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date

from .config import Settings, configure_logging
from .manager import NoteManager
from .store import NoteNotFoundError


def _add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON.")


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notesense",
        description="Local, model-free note intelligence.",
    )
    parser.add_argument(
        "--db",
        default=settings.db_path,
        metavar="PATH",
        help=f"Path to the ChromaDB persistent store (default: {settings.db_path}).",
    )
    parser.add_argument(
        "--collection",
        default=settings.collection,
        metavar="NAME",
        help=f"ChromaDB collection name (default: {settings.collection}).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        metavar="LEVEL",
        help=f"Logging level written to stderr (default: {settings.log_level}).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # add
    p_add = sub.add_parser("add", help="Store a new note.")
    p_add.add_argument("title", help="Note title.")
    p_add.add_argument("content", nargs="?", help="Note content (reads stdin if omitted).")
    p_add.add_argument("--tags", default="", help="Comma-separated tags.")

    # list
    p_list = sub.add_parser("list", help="List stored notes.")
    p_list.add_argument(
        "--limit",
        type=int,
        default=100,
        metavar="N",
        help="Maximum number of notes to show (default: 100).",
    )
    _add_json_flag(p_list)

    # delete
    p_delete = sub.add_parser("delete", help="Delete a note by ID.")
    p_delete.add_argument("id", help="Note ID to delete.")

    # count
    sub.add_parser("count", help="Print the number of stored notes.")

    # search
    p_search = sub.add_parser("search", help="Rank notes against a query.")
    p_search.add_argument("query", help="Free-text query.")
    p_search.add_argument(
        "--threshold",
        type=float,
        default=None,
        metavar="SCORE",
        help=f"Minimum score, exclusive (default: {settings.search_threshold}).",
    )
    _add_json_flag(p_search)

    # related
    p_related = sub.add_parser("related", help="Show notes related to a note.")
    p_related.add_argument("id", help="Note ID.")
    p_related.add_argument("-n", type=int, default=5, metavar="N", help="Number of notes (default: 5).")
    _add_json_flag(p_related)

    # graph
    p_graph = sub.add_parser("graph", help="Rebuild the relationship graph.")
    p_graph.add_argument(
        "--threshold",
        type=float,
        default=None,
        metavar="SCORE",
        help=f"Minimum edge strength (default: {settings.graph_threshold}).",
    )
    _add_json_flag(p_graph)

    # clusters
    p_clusters = sub.add_parser("clusters", help="Group notes by topic.")
    p_clusters.add_argument("-k", type=int, default=5, metavar="K", help="Number of topics (default: 5).")
    _add_json_flag(p_clusters)

    # tasks
    p_tasks = sub.add_parser("tasks", help="Extract tasks.")
    p_tasks.add_argument("text", nargs="?", help="Text to scan (reads stdin if omitted).")
    p_tasks.add_argument("--note", default=None, metavar="ID", help="Scan a stored note instead.")
    _add_json_flag(p_tasks)

    # summarize
    p_summarize = sub.add_parser("summarize", help="Summarize a stored note.")
    p_summarize.add_argument("id", help="Note ID.")
    p_summarize.add_argument(
        "--length",
        type=int,
        default=200,
        metavar="CHARS",
        help="Approximate summary length in characters (default: 200).",
    )

    # suggest-tags
    p_tags = sub.add_parser("suggest-tags", help="Suggest tags for a stored note.")
    p_tags.add_argument("id", help="Note ID.")
    p_tags.add_argument("-n", type=int, default=3, metavar="N", help="Number of tags (default: 3).")
    _add_json_flag(p_tags)

    # digest / weekly
    for name, help_text in (("digest", "Print the daily digest."), ("weekly", "Print the weekly summary.")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument(
            "--date",
            type=date.fromisoformat,
            default=None,
            metavar="YYYY-MM-DD",
            help="Day to report on (default: today, UTC).",
        )
        _add_json_flag(p)

    return parser


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2))


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    parser = _build_parser(settings)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    manager = NoteManager(db_path=args.db, collection_name=args.collection, settings=settings)

    try:
        return _run(manager, args)
    except NoteNotFoundError as exc:
        print(f"Error: note {exc.args[0]} not found.", file=sys.stderr)
        return 1


def _run(manager: NoteManager, args: argparse.Namespace) -> int:
    if args.command == "add":
        content = args.content
        if content is None:
            content = sys.stdin.read()
        if not (args.title.strip() or content.strip()):
            print("Error: no text provided.", file=sys.stderr)
            return 1
        tags = [t.strip() for t in args.tags.split(",") if t.strip()]
        note = manager.add_note(args.title, content, tags=tags)
        print(f"Stored note {note.id}.")

    elif args.command == "list":
        notes = manager.list_notes(limit=args.limit)
        if not notes:
            print("No notes stored.")
            return 0
        if args.as_json:
            _print_json([n.to_dict() for n in notes])
        else:
            for n in notes:
                tags = f" [{', '.join(n.tags)}]" if n.tags else ""
                print(f"id={n.id} created={n.created_at:%Y-%m-%d %H:%M}{tags}")
                print(f"    {n.title}: {n.content[:120]}")
                print()

    elif args.command == "delete":
        manager.delete_note(args.id)
        print(f"Deleted note {args.id}.")

    elif args.command == "count":
        print(manager.count())

    elif args.command == "search":
        results = manager.search(args.query, threshold=args.threshold)
        if not results:
            print("No matching notes found.")
            return 0
        if args.as_json:
            _print_json([r.to_dict() for r in results])
        else:
            for i, r in enumerate(results, 1):
                print(f"[{i}] (similarity={r.score:.3f}) {r.note.title}")
                print(f"    {r.note.content[:200]}")
                print(f"    id={r.note.id}")
                print()

    elif args.command == "related":
        related = manager.related(args.id, limit=args.n)
        if not related:
            print("No related notes found.")
            return 0
        if args.as_json:
            _print_json([r.to_dict() for r in related])
        else:
            for r in related:
                print(f"(strength={r.strength:.3f}) {r.note.title}  id={r.note.id}")

    elif args.command == "graph":
        edges = manager.build_graph(threshold=args.threshold)
        if args.as_json:
            _print_json(manager.graph_data())
        elif not edges:
            print("No relationships found.")
        else:
            for e in edges:
                print(f"{e.source_note_id} -> {e.target_note_id} ({e.type}, strength={e.strength:.3f})")

    elif args.command == "clusters":
        clusters = manager.clusters(num_clusters=args.k)
        if not clusters:
            print("No notes stored.")
            return 0
        if args.as_json:
            _print_json([c.to_dict() for c in clusters])
        else:
            for c in clusters:
                print(f"{c.label} ({len(c.notes)})")
                for n in c.notes:
                    print(f"    {n.title}  id={n.id}")

    elif args.command == "tasks":
        if args.note is not None:
            tasks = manager.extract_tasks(note_id=args.note)
        else:
            text = args.text if args.text is not None else sys.stdin.read()
            tasks = manager.extract_tasks(text)
        if not tasks:
            print("No tasks found.")
            return 0
        if args.as_json:
            _print_json([t.to_dict() for t in tasks])
        else:
            for t in tasks:
                box = "x" if t.completed else " "
                due = f" due={t.due_date:%Y-%m-%d}" if t.due_date else ""
                print(f"- [{box}] {t.title} ({t.priority}){due}")

    elif args.command == "summarize":
        print(manager.summarize(args.id, max_length=args.length))

    elif args.command == "suggest-tags":
        tags = manager.suggest_tags(args.id, limit=args.n)
        if args.as_json:
            _print_json(tags)
        elif not tags:
            print("No new tags to suggest.")
        else:
            print(", ".join(tags))

    elif args.command == "digest":
        digest = manager.daily_digest(args.date)
        if args.as_json:
            _print_json(digest.to_dict())
        else:
            print(f"# Daily digest for {digest.date}")
            print()
            print(digest.summary)
            for insight in digest.insights:
                print(f"- {insight.message}")

    elif args.command == "weekly":
        summary = manager.weekly_summary(args.date)
        if args.as_json:
            _print_json(summary.to_dict())
        else:
            t = summary.totals
            print(f"{summary.period}: {t.notes_created} created, {t.notes_updated} updated, "
                  f"{t.tasks_completed} tasks completed, {t.meetings_recorded} meetings")
            print(f"Per day: {summary.average_per_day['notes']} notes, "
                  f"{summary.average_per_day['tasks']} tasks")

    return 0


if __name__ == "__main__":
    sys.exit(main())
