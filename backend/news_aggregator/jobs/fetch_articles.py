"""
Batch job that fetches articles from every configured provider.

Runs on demand from the CLI and on an interval under the scheduler. One
provider failing never stops the others; the job reports per-provider and
total stored counts.
"""
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

import structlog

from news_aggregator.config import Settings, get_settings
from news_aggregator.models.database import Database
from news_aggregator.models.domain import ProviderName, SearchParams
from news_aggregator.providers import HttpClient, NewsProvider, build_providers
from news_aggregator.providers.base import Params
from news_aggregator.services.ingestion import ArticleIngestionService


class FetchArticlesJob:
    """
    Fetch-and-store across providers.

    Providers are built from settings for each run and share one HttpClient
    that is closed when the run ends. Tests pass ``providers`` directly.
    """

    def __init__(
        self,
        database: Database,
        settings: Optional[Settings] = None,
        providers: Optional[list[NewsProvider]] = None,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.database = database
        self.settings = settings or get_settings()
        self.providers = providers
        self.logger = logger or structlog.get_logger(__name__)
        self.ingestion = ArticleIngestionService(
            database.async_session,
            logger=self.logger,
            chunk_size=self.settings.insert_chunk_size,
        )

    async def run(
        self,
        params: Params = None,
        provider_names: Optional[Iterable[Union[ProviderName, str]]] = None,
        concurrent: Optional[bool] = None,
    ) -> dict:
        """
        Execute one fetch run.

        Args:
            params: Search parameters; defaults to the configured page size
            provider_names: Limit the run to these providers (all when None)
            concurrent: Override ``settings.fetch_concurrently``

        Returns:
            Stats with per-provider results, total stored and errors
        """
        start_time = datetime.now(timezone.utc)
        if params is None:
            params = SearchParams(page_size=self.settings.fetch_page_size)
        if concurrent is None:
            concurrent = self.settings.fetch_concurrently

        self.logger.info(
            "Starting article fetch job",
            start_time=start_time.isoformat(),
            concurrent=concurrent,
        )

        async with HttpClient(
            retry_attempts=self.settings.http_retry_attempts,
            logger=self.logger,
        ) as http_client:
            providers = self.providers
            if providers is None:
                providers = build_providers(provider_names, http_client, self.settings, self.logger)

            results = await self.ingestion.ingest_many(providers, params, concurrent=concurrent)

        for result in results:
            self.logger.info(
                "Provider fetch finished",
                provider=result.provider,
                fetched=result.fetched,
                stored=result.stored,
                errors=len(result.errors),
            )

        stats = {
            "results": results,
            "total_stored": sum(r.stored for r in results),
            "errors": [f"{r.provider}: {error}" for r in results for error in r.errors],
            "elapsed_seconds": (datetime.now(timezone.utc) - start_time).total_seconds(),
        }

        self.logger.info(
            "Article fetch job completed",
            total_stored=stats["total_stored"],
            providers=len(results),
            elapsed_seconds=stats["elapsed_seconds"],
        )

        return stats
