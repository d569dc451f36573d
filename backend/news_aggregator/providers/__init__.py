"""
News provider adapters for the News Aggregator.
"""
from typing import Iterable, Optional, Union

import structlog

from news_aggregator.config import Settings, get_settings
from news_aggregator.models.domain import ProviderName
from news_aggregator.providers.base import HttpNewsProvider, NewsProvider, ProviderRequest
from news_aggregator.providers.config import ProviderConfig
from news_aggregator.providers.guardian import GuardianProvider
from news_aggregator.providers.http_client import HttpClient
from news_aggregator.providers.newsapi import NewsAPIProvider
from news_aggregator.providers.nytimes import NYTimesProvider
from news_aggregator.providers.query_builder import QueryBuilder

PROVIDER_CLASSES: dict[ProviderName, type[HttpNewsProvider]] = {
    ProviderName.NEWSAPI: NewsAPIProvider,
    ProviderName.GUARDIAN: GuardianProvider,
    ProviderName.NYTIMES: NYTimesProvider,
}


def build_provider(
    name: Union[ProviderName, str],
    http_client: Optional[HttpClient] = None,
    settings: Optional[Settings] = None,
    logger: Optional[structlog.stdlib.BoundLogger] = None,
) -> HttpNewsProvider:
    """Instantiate one provider, configured from settings."""
    provider_name = ProviderName(name)
    settings = settings or get_settings()
    provider_cls = PROVIDER_CLASSES[provider_name]
    return provider_cls(
        config=ProviderConfig.from_settings(provider_name.value, settings),
        http_client=http_client,
        logger=logger,
    )


def build_providers(
    names: Optional[Iterable[Union[ProviderName, str]]] = None,
    http_client: Optional[HttpClient] = None,
    settings: Optional[Settings] = None,
    logger: Optional[structlog.stdlib.BoundLogger] = None,
) -> list[HttpNewsProvider]:
    """Instantiate the named providers (all of them when ``names`` is None), sharing one HttpClient."""
    settings = settings or get_settings()
    http_client = http_client or HttpClient(retry_attempts=settings.http_retry_attempts, logger=logger)
    selected = list(names) if names is not None else list(ProviderName)
    return [build_provider(name, http_client, settings, logger) for name in selected]


__all__ = [
    "NewsProvider",
    "HttpNewsProvider",
    "ProviderRequest",
    "ProviderConfig",
    "HttpClient",
    "QueryBuilder",
    "NewsAPIProvider",
    "GuardianProvider",
    "NYTimesProvider",
    "PROVIDER_CLASSES",
    "build_provider",
    "build_providers",
]
