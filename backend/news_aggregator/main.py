"""
Process wiring for the News Aggregator: logging and the fetch scheduler.
"""
import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from news_aggregator.config import Settings, get_settings
from news_aggregator.jobs.fetch_articles import FetchArticlesJob
from news_aggregator.models.database import Database

# Libraries that log every request/statement at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy", "apscheduler")

logger = structlog.get_logger()


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structured logging on top of stdlib logging."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


async def run_scheduled_fetch(job: FetchArticlesJob) -> None:
    """Scheduler entry point; a failed run is logged and the next one still fires."""
    try:
        stats = await job.run()
        logger.info("Scheduled fetch completed", total_stored=stats["total_stored"])
    except Exception as e:
        logger.error("Scheduled fetch failed", error=str(e), exc_info=True)


def create_scheduler(job: FetchArticlesJob, interval_minutes: int) -> AsyncIOScheduler:
    """Scheduler running ``job`` every ``interval_minutes``, starting immediately."""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        run_scheduled_fetch,
        IntervalTrigger(minutes=interval_minutes),
        args=[job],
        id="fetch_articles",
        name="Fetch Articles",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
    )
    return scheduler


async def serve(settings: Optional[Settings] = None, interval_minutes: Optional[int] = None) -> None:
    """Run the fetch job on an interval until cancelled."""
    settings = settings or get_settings()
    interval_minutes = interval_minutes or settings.fetch_interval_minutes

    logger.info("Initializing database", url=settings.database_url)
    database = Database(settings.database_url, echo=settings.debug)
    await database.create_tables()

    scheduler = create_scheduler(FetchArticlesJob(database, settings), interval_minutes)
    scheduler.start()
    logger.info("Scheduler started", interval_minutes=interval_minutes)

    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down")
        scheduler.shutdown(wait=False)
        await database.dispose()
