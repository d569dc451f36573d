"""
Base interface for news providers.
All providers (NewsAPI, The Guardian, NYTimes) implement this interface.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

import structlog

from news_aggregator.exceptions import NewsProviderError
from news_aggregator.models.domain import CanonicalArticle, SearchParams
from news_aggregator.providers.config import ProviderConfig
from news_aggregator.providers.http_client import HttpClient, JSONPayload

Params = Union[SearchParams, Mapping[str, Any], None]


def dig(record: Any, *path: str) -> Any:
    """Follow nested keys, returning None as soon as a level is missing or not a mapping."""
    value = record
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def coerce_params(params: Params) -> SearchParams:
    """Accept SearchParams, a plain mapping using wire names, or None."""
    if params is None:
        return SearchParams()
    if isinstance(params, SearchParams):
        return params
    return SearchParams.model_validate(dict(params))


@dataclass(frozen=True)
class ProviderRequest:
    """A fully resolved provider call."""
    url: str
    params: dict[str, Any] = field(default_factory=dict)
    # Search endpoints return a different record shape than headline feeds
    is_search: bool = False


class NewsProvider(ABC):
    """Abstract base class for news providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the provider."""
        pass

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Stable short id, used as the Source get-or-create key."""
        pass

    @abstractmethod
    async def fetch_articles(self, params: Params = None) -> list[CanonicalArticle]:
        """
        Fetch and normalize articles.

        Args:
            params: keyword, category, from, to, page, pageSize

        Returns:
            Canonical articles; an empty list when the provider is
            misconfigured, unreachable or returns something unexpected.
        """
        pass


class HttpNewsProvider(NewsProvider):
    """
    News provider backed by a JSON HTTP API.

    Subclasses describe the request, where the records live in the
    response, and how one record maps to a CanonicalArticle. The fetch
    workflow and its failure handling live here.
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        http_client: Optional[HttpClient] = None,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.config = config or ProviderConfig.from_settings(self.identifier)
        self.http = http_client or HttpClient()
        self.logger = logger or structlog.get_logger(__name__)

    async def fetch_articles(self, params: Params = None) -> list[CanonicalArticle]:
        try:
            if not self.config.is_valid():
                self.logger.warning(f"{self.name} is not properly configured", provider=self.identifier)
                return []

            request = self.build_request(coerce_params(params))

            payload = await self.http.get(request.url, request.params, self.config.timeout)
            if payload is None:
                return []

            records = self.extract_records(payload, request)
            if not isinstance(records, list):
                self.logger.error(
                    f"{self.name} returned invalid response format",
                    provider=self.identifier,
                    url=request.url,
                )
                return []

            articles = self.transform(records, is_search=request.is_search)
            self.logger.info(
                "Articles fetched", provider=self.identifier, count=len(articles), url=request.url
            )
            return articles

        except Exception as e:
            self.logger.error(
                f"{self.name} exception", provider=self.identifier, error=str(e), exc_info=True
            )
            return []

    def transform(self, records: list[Any], is_search: bool = False) -> list[CanonicalArticle]:
        """Map raw provider records to canonical articles, dropping the ones the provider rejects."""
        articles = []
        for record in records:
            if not isinstance(record, dict):
                raise NewsProviderError.invalid_response(self.identifier)
            article = self.transform_record(record, is_search=is_search)
            if article is not None:
                articles.append(article)
        return articles

    @abstractmethod
    def build_request(self, params: SearchParams) -> ProviderRequest:
        """Translate generic search params into this provider's request."""
        pass

    @abstractmethod
    def extract_records(self, payload: JSONPayload, request: ProviderRequest) -> Optional[list[Any]]:
        """Locate the results array in a decoded response, or None if absent."""
        pass

    @abstractmethod
    def transform_record(self, record: dict[str, Any], is_search: bool = False) -> Optional[CanonicalArticle]:
        """Map one raw record to a CanonicalArticle."""
        pass

    def endpoint(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)
