#!/usr/bin/env python3
"""
Braindrop - capture and browse ideas from the command line.

Command-line entry point over the idea store and query engine:
  - Capture text, voice and image ideas with tags
  - List, search and filter ideas
  - Edit, star and delete ideas
  - Show tags and stats, export or clear the collection

Usage:
    python main.py add "Buy milk" --content "2%" --tag errand
    python main.py list --favorites --search milk
    python main.py fav <id>
    python main.py --show-config

Examples:
    # Capture a voice memo reference
    python main.py add "Standup notes" --type voice --recording-uri file:///memo.m4a

    # Oldest first, only ideas tagged work or idea
    python main.py list --tag work --tag idea --oldest-first
"""

import argparse
import json
import logging
import sys
from datetime import date
from typing import List

from braindrop import __version__
from braindrop.config import (
    LOG_LEVEL,
    print_config_summary,
    validate_config,
)
from braindrop.errors import (
    BraindropError,
    DecodeError,
    NotFoundError,
    StorageUnavailable,
    ValidationError,
)
from braindrop.logging_config import setup_logging
from braindrop.models import Idea, IdeaType, NewIdea
from braindrop.query import (
    IdeaFilter,
    distinct_tags,
    filter_ideas,
    sort_by_created_at,
)
from braindrop.store import IdeaStore, create_store

logger = logging.getLogger(__name__)

IDEA_TYPES = [t.value for t in IdeaType]


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected YYYY-MM-DD)")


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="braindrop",
        description="Capture, search, and manage your ideas.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add "Buy milk" --content "2%%" --tag errand
  %(prog)s add "Whiteboard" --type image --uri file:///board.jpg
  %(prog)s list --type text --search milk
  %(prog)s list --tag work --tag idea --oldest-first
  %(prog)s fav 3f2c...                Toggle favorite
  %(prog)s delete 3f2c...             Delete (no error if already gone)
  %(prog)s export > ideas.json        Export the whole collection
        """,
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # add
    add = subparsers.add_parser("add", help="Capture a new idea")
    add.add_argument("title", help="Idea title")
    add.add_argument(
        "--type", "-t",
        choices=IDEA_TYPES,
        default="text",
        help="Kind of idea (default: text)",
    )
    add.add_argument("--content", "-c", default="", help="Body text (required for text ideas)")
    add.add_argument("--description", "-d", default=None, help="Description (voice/image)")
    add.add_argument("--uri", default=None, help="Image location (image ideas)")
    add.add_argument("--recording-uri", default=None, help="Recording location (voice ideas)")
    add.add_argument(
        "--tag",
        action="append",
        default=[],
        metavar="TAG",
        help="Tag the idea (repeatable)",
    )
    add.add_argument("--favorite", "-f", action="store_true", help="Star the idea")

    # list
    lst = subparsers.add_parser("list", help="List ideas, newest first")
    lst.add_argument("--type", "-t", choices=IDEA_TYPES, default=None, help="Only this kind")
    lst.add_argument("--favorites", action="store_true", help="Only starred ideas")
    lst.add_argument(
        "--tag",
        action="append",
        default=[],
        metavar="TAG",
        help="Only ideas with any of these tags (repeatable)",
    )
    lst.add_argument("--search", "-s", default="", metavar="QUERY", help="Search title, content, tags")
    lst.add_argument("--date", type=_parse_date, default=None, metavar="YYYY-MM-DD", help="Captured on this day")
    lst.add_argument("--oldest-first", action="store_true", help="Sort oldest first")
    lst.add_argument("--json", action="store_true", help="Print JSON instead of text")

    # show
    show = subparsers.add_parser("show", help="Show one idea")
    show.add_argument("id", help="Idea id")

    # edit
    edit = subparsers.add_parser("edit", help="Change an idea")
    edit.add_argument("id", help="Idea id")
    edit.add_argument("--title", default=None, help="New title")
    edit.add_argument("--content", default=None, help="New body text (text ideas)")
    edit.add_argument("--description", default=None, help="New description (voice/image)")
    edit.add_argument(
        "--tag",
        action="append",
        default=None,
        metavar="TAG",
        help="Replace tags (repeatable)",
    )

    # fav
    fav = subparsers.add_parser("fav", help="Toggle favorite")
    fav.add_argument("id", help="Idea id")

    # delete
    delete = subparsers.add_parser("delete", help="Delete an idea")
    delete.add_argument("id", help="Idea id")

    subparsers.add_parser("tags", help="List all tags")
    subparsers.add_parser("stats", help="Show idea counts")
    subparsers.add_parser("export", help="Print the collection as JSON")

    clear = subparsers.add_parser("clear", help="Delete ALL ideas")
    clear.add_argument("--yes", action="store_true", help="Confirm deleting everything")

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Braindrop Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def format_idea(idea: Idea, detailed: bool = False) -> str:
    """Render an idea for the terminal."""
    star = "★" if idea.is_favorite else " "
    created = idea.created_at.strftime("%b %d, %Y")
    line = f"{star} {idea.id}  [{idea.type.value}] {idea.title}  ({created})"
    if idea.tags:
        line += "  #" + " #".join(idea.tags)

    if not detailed:
        return line

    lines = [line]
    if idea.content:
        lines.append(f"    {idea.content}")
    description = getattr(idea, "description", None)
    if description:
        lines.append(f"    {description}")
    for label, attr in (("image", "uri"), ("recording", "recording_uri")):
        value = getattr(idea, attr, None)
        if value:
            lines.append(f"    {label}: {value}")
    lines.append(f"    updated {idea.updated_at.isoformat()}")
    return "\n".join(lines)


# =============================================================================
# Commands
# =============================================================================

def cmd_add(store: IdeaStore, args: argparse.Namespace) -> int:
    idea = store.create(NewIdea(
        type=args.type,
        title=args.title,
        content=args.content,
        description=args.description,
        tags=args.tag,
        is_favorite=args.favorite,
        uri=args.uri,
        recording_uri=args.recording_uri,
    ))
    print(f"✓ Captured {idea.id}")
    return 0


def cmd_list(store: IdeaStore, args: argparse.Namespace) -> int:
    criteria = IdeaFilter(
        type=args.type,
        favorites_only=args.favorites,
        tags=args.tag,
        search_query=args.search,
        created_on=args.date,
    )
    all_ideas = store.list()
    ideas = sort_by_created_at(filter_ideas(all_ideas, criteria), ascending=args.oldest_first)

    if args.json:
        print(json.dumps([idea.to_dict() for idea in ideas], indent=2, ensure_ascii=False))
        return 0

    if not ideas:
        print("No ideas found." if not all_ideas else "No ideas match. Try adjusting your search or filters.")
        return 0

    for idea in ideas:
        print(format_idea(idea))
    print(f"\n{len(ideas)} of {len(all_ideas)} ideas")
    return 0


def cmd_show(store: IdeaStore, args: argparse.Namespace) -> int:
    print(format_idea(store.get(args.id), detailed=True))
    return 0


def cmd_edit(store: IdeaStore, args: argparse.Namespace) -> int:
    changes = {}
    for name in ("title", "content", "description"):
        value = getattr(args, name)
        if value is not None:
            changes[name] = value
    if args.tag is not None:
        changes["tags"] = args.tag

    if not changes:
        print("Nothing to change (use --title, --content, --description or --tag)")
        return 1

    idea = store.update(args.id, **changes)
    print(f"✓ Updated {idea.id}")
    return 0


def cmd_fav(store: IdeaStore, args: argparse.Namespace) -> int:
    idea = store.toggle_favorite(args.id)
    state = "starred" if idea.is_favorite else "unstarred"
    print(f"✓ {idea.title} {state}")
    return 0


def cmd_delete(store: IdeaStore, args: argparse.Namespace) -> int:
    store.delete(args.id)
    print(f"✓ Deleted {args.id}")
    return 0


def cmd_tags(store: IdeaStore, args: argparse.Namespace) -> int:
    for tag in distinct_tags(store.list()):
        print(tag)
    return 0


def cmd_stats(store: IdeaStore, args: argparse.Namespace) -> int:
    stats = store.stats()
    print(f"Total:     {stats.total}")
    print(f"Today:     {stats.today}")
    print(f"Favorites: {stats.favorites}")
    for type_name, count in stats.by_type.items():
        print(f"  {type_name:<8} {count}")
    return 0


def cmd_export(store: IdeaStore, args: argparse.Namespace) -> int:
    print(store.export_json())
    return 0


def cmd_clear(store: IdeaStore, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to delete all ideas without --yes")
        return 1
    store.clear_all()
    print("✓ All data has been cleared")
    return 0


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "show": cmd_show,
    "edit": cmd_edit,
    "fav": cmd_fav,
    "delete": cmd_delete,
    "tags": cmd_tags,
    "stats": cmd_stats,
    "export": cmd_export,
    "clear": cmd_clear,
}


def main(argv: List[str] = None, store: IdeaStore = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).
        store: Store to use instead of the configured one (for tests).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else ("WARNING" if LOG_LEVEL == "INFO" else LOG_LEVEL))

    # Handle --show-config
    if args.show_config:
        show_config()
        return 0

    if not args.command:
        parser.print_help()
        return 1

    try:
        if store is None:
            store = create_store()
        elif not store.ready:
            store.initialize()

        return COMMANDS[args.command](store, args)

    except ValidationError as e:
        print(f"❌ Invalid idea: {'; '.join(e.problems)}")
        return 1
    except NotFoundError as e:
        print(f"❌ {e}")
        return 1
    except StorageUnavailable as e:
        print(f"❌ Storage unavailable, your change may not have been saved: {e}")
        return 1
    except DecodeError as e:
        print(f"❌ Stored ideas could not be read (left untouched): {e}")
        return 1
    except BraindropError as e:
        print(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
