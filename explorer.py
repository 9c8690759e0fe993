#!/usr/bin/env python3
"""Book Search Explorer CLI - catalog backend client."""
import argparse
import asyncio
import sys
import json
from tabulate import tabulate
from booksearch.client import CatalogClient
from booksearch.config import Config
from booksearch.models import Filters, PublishedFilter
from booksearch.notify import NotificationLog
from booksearch.parse import parse_facets, parse_search_response, parse_suggestions
from booksearch.session import BookSearchSession
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def make_client(config: Config) -> CatalogClient:
    return CatalogClient(
        base_url=config.api_url,
        timeout=config.DEFAULT_TIMEOUT,
        max_retries=config.DEFAULT_MAX_RETRIES
    )


def filters_from_args(args) -> Filters:
    return Filters(
        category=args.category or "",
        author=args.author or "",
        published=PublishedFilter.parse(args.published)
    )


def show_filters(args, config: Config):
    """Print the filter vocabulary."""
    with make_client(config) as client:
        response = client.get_filters()

    if response is None:
        logger.error("Failed to load filters")
        sys.exit(1)

    vocabulary = parse_facets(response)

    if args.format == "json":
        print(json.dumps({
            "categories": list(vocabulary.categories),
            "authors": list(vocabulary.authors)
        }, indent=2))
        return

    rows = [["category", c] for c in vocabulary.categories]
    rows += [["author", a] for a in vocabulary.authors]
    print("\n" + tabulate(rows, headers=["Facet", "Value"], tablefmt="grid"))


def show_suggestions(args, config: Config):
    """Print autocomplete suggestions for a partial query."""
    with make_client(config) as client:
        response = client.suggest(args.query)

    if response is None:
        logger.error("Failed to fetch suggestions")
        sys.exit(1)

    for suggestion in parse_suggestions(response):
        print(suggestion)


def search_books(args, config: Config):
    """One-shot search with retries."""
    with make_client(config) as client:
        response = client.search(args.query, filters_from_args(args))

    if response is None:
        logger.error("Search failed")
        sys.exit(1)

    books = parse_search_response(response)
    logger.info(f"Found {len(books)} books")
    display_books(books, args.format)


async def replay_typing(args, config: Config):
    """
    Feed the query to an interactive session one keystroke at a time.

    Every keystroke fires its suggestion request without waiting for the
    previous one, the way a fast typist would.
    """
    notifications = NotificationLog()

    async with BookSearchSession.from_config(config, notifications) as session:
        await session.start()

        keystrokes = [args.query[:i] for i in range(1, len(args.query) + 1)]
        tasks = []
        for text in keystrokes:
            tasks.append(asyncio.create_task(session.type(text)))
            await asyncio.sleep(args.delay)
        await asyncio.gather(*tasks)

        snapshot = session.snapshot()
        if snapshot.suggestions_visible:
            for i, suggestion in enumerate(snapshot.suggestions, 1):
                print(f"  [{i}] {suggestion}")
        else:
            print("  (no suggestions)")

        if args.pick:
            if not 1 <= args.pick <= len(snapshot.suggestions):
                logger.error(f"No suggestion number {args.pick}")
                sys.exit(1)
            await session.select_suggestion(snapshot.suggestions[args.pick - 1])
        else:
            await session.submit()

        snapshot = session.snapshot()

    display_books(snapshot.results, args.format)
    if notifications.destructive:
        sys.exit(1)


def display_books(books, format_type: str):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["Title", "Author", "Category", "Status"]
        rows = [
            [
                book.title[:50] + "..." if len(book.title) > 50 else book.title,
                book.author[:30] + "..." if len(book.author) > 30 else book.author,
                book.category,
                book.status_str
            ]
            for book in books
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        books_dict = [
            {
                "id": book.id,
                "title": book.title,
                "author": book.author,
                "category": book.category,
                "published": book.published
            }
            for book in books
        ]
        print(json.dumps(books_dict, indent=2))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {book.title} - {book.author}")


def add_filter_arguments(parser):
    parser.add_argument("--category", help="Only books in this category")
    parser.add_argument("--author", help="Only books by this author")
    parser.add_argument("--published", choices=["true", "false"], help="Publication status")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Book Search Explorer - catalog backend client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the filter vocabulary
  %(prog)s filters

  # Autocomplete
  %(prog)s suggest "Du"

  # Filtered search
  %(prog)s search "dune" --category Fiction --published true

  # Type a query into a live session and pick the first suggestion
  %(prog)s type "Dune" --pick 1
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Filters command
    filters_parser = subparsers.add_parser("filters", help="Show available filters")
    filters_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    # Suggest command
    suggest_parser = subparsers.add_parser("suggest", help="Autocomplete a partial query")
    suggest_parser.add_argument("query", help="Partial query")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search for books")
    search_parser.add_argument("query", nargs="?", default="", help="Search query")
    search_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    add_filter_arguments(search_parser)

    # Type command
    type_parser = subparsers.add_parser("type", help="Replay typing through an interactive session")
    type_parser.add_argument("query", help="Text to type")
    type_parser.add_argument("--pick", type=int, help="Pick the Nth suggestion instead of submitting")
    type_parser.add_argument("--delay", type=float, default=0.05, help="Seconds between keystrokes (default: 0.05)")
    type_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()

    try:
        if args.command == "filters":
            show_filters(args, config)

        elif args.command == "suggest":
            show_suggestions(args, config)

        elif args.command == "search":
            search_books(args, config)

        elif args.command == "type":
            asyncio.run(replay_typing(args, config))

    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"❌ Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
