"""
Command line interface.

Usage:
    # Fetch from every provider
    news-aggregator fetch

    # Fetch one provider, searching for a keyword
    news-aggregator fetch --provider guardian --keyword climate

    # Run the fetch job every 30 minutes
    news-aggregator serve --interval-minutes 30

    # List sources, or switch one off
    news-aggregator sources
    news-aggregator sources --deactivate nytimes
"""

import argparse
import asyncio
import sys
from typing import Optional

from news_aggregator.config import Settings, get_settings
from news_aggregator.jobs.fetch_articles import FetchArticlesJob
from news_aggregator.main import configure_logging, serve
from news_aggregator.models.database import Database
from news_aggregator.models.domain import ProviderName, SearchParams
from news_aggregator.repositories import SourceRepository


async def cmd_fetch(args, settings: Settings) -> int:
    """Fetch articles and store the new ones."""
    database = Database(settings.database_url, echo=settings.debug)
    await database.create_tables()

    params = SearchParams(
        keyword=args.keyword,
        category=args.category,
        from_date=args.from_date,
        to_date=args.to_date,
        page_size=args.page_size,
    )
    names = [args.provider] if args.provider else None

    print("Starting to fetch articles...")
    try:
        job = FetchArticlesJob(database, settings)
        stats = await job.run(params, names, concurrent=True if args.concurrent else None)
    finally:
        await database.dispose()

    print("\n" + "=" * 60)
    print("FETCH RESULTS")
    print("=" * 60)

    for result in stats["results"]:
        print(result)

    print("-" * 60)
    print(f"Total articles stored: {stats['total_stored']}")

    return 0


async def cmd_serve(args, settings: Settings) -> int:
    """Run the fetch job on an interval."""
    interval = args.interval_minutes or settings.fetch_interval_minutes
    print(f"Starting scheduler (fetch every {interval} minutes)")
    print("Press Ctrl+C to stop")

    try:
        await serve(settings, interval)
    except asyncio.CancelledError:
        print("\nShutting down...")

    return 0


async def cmd_init_db(args, settings: Settings) -> int:
    database = Database(settings.database_url, echo=settings.debug)
    try:
        await database.create_tables()
    finally:
        await database.dispose()

    print("Database tables created")
    return 0


async def cmd_sources(args, settings: Settings) -> int:
    """List sources, optionally enabling or disabling one first."""
    database = Database(settings.database_url, echo=settings.debug)
    await database.create_tables()

    try:
        async with database.async_session() as session:
            repo = SourceRepository(session)

            identifier = args.activate or args.deactivate
            if identifier:
                found = await repo.set_active(identifier, active=bool(args.activate))
                if not found:
                    print(f"Unknown source: {identifier}")
                    return 1

            sources = await repo.all()
    finally:
        await database.dispose()

    print("\n" + "=" * 50)
    print("SOURCES")
    print("=" * 50)

    if not sources:
        print("  (none yet; sources are created on first fetch)")

    for source in sources:
        status = "✓ active" if source.is_active else "✗ inactive"
        print(f"  {source.api_identifier:<10} {source.name:<20} {status}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="news-aggregator",
        description="News Aggregator - fetch and store articles from news providers",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Fetch and store articles")
    fetch_parser.add_argument(
        "--provider", "-p",
        choices=[p.value for p in ProviderName],
        help="Fetch from a single provider (default: all)"
    )
    fetch_parser.add_argument(
        "--page-size", "-n",
        type=int,
        default=50,
        help="Articles requested per provider (default: 50)"
    )
    fetch_parser.add_argument("--keyword", "-k", help="Search keyword")
    fetch_parser.add_argument("--category", "-c", help="Provider category or section")
    fetch_parser.add_argument("--from", dest="from_date", help="Earliest publish date (YYYY-MM-DD)")
    fetch_parser.add_argument("--to", dest="to_date", help="Latest publish date (YYYY-MM-DD)")
    fetch_parser.add_argument(
        "--concurrent",
        action="store_true",
        help="Fetch providers in parallel"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the fetch job on an interval")
    serve_parser.add_argument(
        "--interval-minutes", "-i",
        type=int,
        default=None,
        help="Fetch interval in minutes (default: FETCH_INTERVAL_MINUTES or 60)"
    )

    # Init command
    subparsers.add_parser("init-db", help="Create database tables")

    # Sources command
    sources_parser = subparsers.add_parser("sources", help="List or toggle sources")
    toggle = sources_parser.add_mutually_exclusive_group()
    toggle.add_argument("--activate", metavar="IDENTIFIER", help="Enable ingestion for a source")
    toggle.add_argument("--deactivate", metavar="IDENTIFIER", help="Disable ingestion for a source")

    return parser


COMMANDS = {
    "fetch": cmd_fetch,
    "serve": cmd_serve,
    "init-db": cmd_init_db,
    "sources": cmd_sources,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    try:
        return asyncio.run(COMMANDS[args.command](args, settings))
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
