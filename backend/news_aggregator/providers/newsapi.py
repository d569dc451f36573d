"""
NewsAPI adapter for current news articles.
API docs: https://newsapi.org/docs
"""
from typing import Any, Optional

from news_aggregator.core.text import parse_timestamp
from news_aggregator.models.domain import CanonicalArticle, SearchParams
from news_aggregator.providers.base import HttpNewsProvider, ProviderRequest
from news_aggregator.providers.http_client import JSONPayload
from news_aggregator.providers.query_builder import QueryBuilder

# NewsAPI keeps retracted articles in results with this placeholder text
REMOVED_PLACEHOLDER = "[Removed]"


class NewsAPIProvider(HttpNewsProvider):
    """Adapter for fetching news articles from NewsAPI."""

    @property
    def name(self) -> str:
        return "NewsAPI"

    @property
    def identifier(self) -> str:
        return "newsapi"

    def build_request(self, params: SearchParams) -> ProviderRequest:
        query = (
            QueryBuilder.make()
            .add("apiKey", self.config.api_key)
            .add("language", self.config.language)
            .add("pageSize", params.page_size or self.config.page_size)
            .add("page", params.page or 1)
            .add_if_present("q", params.keyword)
            .add_if_present("category", params.category)
            .add_if_present("from", params.from_date)
            .add_if_present("to", params.to_date)
        )

        # /everything requires a query; without one we read the headline feed
        path = "/everything" if params.keyword else "/top-headlines"

        return ProviderRequest(url=self.endpoint(path), params=query.to_dict())

    def extract_records(self, payload: JSONPayload, request: ProviderRequest) -> Optional[list[Any]]:
        if not isinstance(payload, dict):
            return None
        return payload.get("articles")

    def transform_record(self, record: dict[str, Any], is_search: bool = False) -> Optional[CanonicalArticle]:
        """Parse a NewsAPI article into a CanonicalArticle."""
        title = record.get("title")
        if title == REMOVED_PLACEHOLDER:
            return None

        description = record.get("description")
        if description == REMOVED_PLACEHOLDER:
            description = None

        return CanonicalArticle(
            title=title or "Untitled",
            description=description,
            content=record.get("content"),
            url=record.get("url"),
            image_url=record.get("urlToImage"),
            author_name=record.get("author") or "Unknown",
            published_at=parse_timestamp(record.get("publishedAt")),
            category=None,  # NewsAPI articles carry no section/category
        )
