#!/usr/bin/env python3
"""
Idea Swipe - command-line entry point.

Inspect and exercise the engine against the configured storage backend:
  - Seed sample ideas into a development database
  - Show a user's feed (ideas they have not judged yet)
  - Show feedback statistics for an idea
  - Show the current configuration

Usage:
    python main.py --show-config              # Show configuration and exit
    python main.py --seed                     # Insert sample ideas
    python main.py --feed USER_ID             # List a user's feed
    python main.py --stats IDEA_ID            # Show stats for an idea

Examples:
    # Fresh throwaway database with sample data
    python main.py --backend memory --seed --feed alice

    # Stats from the SQLite database
    python main.py --backend sqlite --stats 3f2c...
"""

import argparse
import sys

from ideaswipe import __version__
from ideaswipe.config import (
    VALID_BACKENDS,
    configure_logging,
    print_config_summary,
    validate_config,
)
from ideaswipe.engine import IdeaEngine
from ideaswipe.errors import IdeaSwipeError
from ideaswipe.seed import DEFAULT_SEED_AUTHOR, seed_ideas
from ideaswipe.storage import get_storage


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="idea-swipe",
        description="Seed ideas, inspect feeds and read feedback statistics.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --show-config                  Show configuration and exit
  %(prog)s --seed                         Insert the sample ideas
  %(prog)s --seed --author demo           Insert sample ideas as author "demo"
  %(prog)s --feed alice                   List ideas alice has not judged
  %(prog)s --stats IDEA_ID                Show feedback stats for an idea
  %(prog)s --backend memory --seed --feed alice
        """,
    )

    # Actions
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Insert the sample ideas into storage",
    )

    parser.add_argument(
        "--author",
        default=DEFAULT_SEED_AUTHOR,
        metavar="AUTHOR_ID",
        help=f"Author id recorded on seeded ideas (default: {DEFAULT_SEED_AUTHOR})",
    )

    parser.add_argument(
        "--feed",
        metavar="USER_ID",
        help="List the ideas USER_ID has not judged yet",
    )

    parser.add_argument(
        "--stats",
        metavar="IDEA_ID",
        help="Show feedback statistics for IDEA_ID",
    )

    # Storage options
    parser.add_argument(
        "--backend", "-b",
        choices=list(VALID_BACKENDS),
        default=None,
        help="Storage backend (default: STORAGE_BACKEND from the environment)",
    )

    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors and results",
    )

    # Info options
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

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Idea Swipe Configuration")
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


def print_feed(engine: IdeaEngine, user_id: str) -> None:
    """Print a user's feed, newest first."""
    ideas = engine.get_feed(user_id)
    print(f"Feed for {user_id}: {len(ideas)} ideas")
    for idea in ideas:
        print(f"  {idea.id}  {idea.title}  [{', '.join(idea.tags)}]")


def print_stats(engine: IdeaEngine, idea_id: str) -> None:
    """Print feedback statistics for one idea."""
    item = engine.get_idea(idea_id)
    stats = item.stats
    mean = f"{stats.mean_rating:.1f}" if stats.has_ratings else "no ratings"
    print(f"{item.idea.title} ({idea_id})")
    print(f"  Interactions: {stats.total}")
    print(f"  Would use:    {stats.accept_percentage}%")
    print(f"  Mean rating:  {mean}")


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle --show-config
    if args.show_config:
        show_config()
        return 0

    if not (args.seed or args.feed or args.stats):
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging()

    try:
        engine = IdeaEngine.from_storage(get_storage(args.backend))

        if args.seed:
            ideas = seed_ideas(engine, author_id=args.author)
            if not args.quiet:
                print(f"Seeded {len(ideas)} ideas as {args.author}")

        if args.feed:
            print_feed(engine, args.feed)

        if args.stats:
            print_stats(engine, args.stats)

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except (IdeaSwipeError, ValueError) as e:
        print(f"\n❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
