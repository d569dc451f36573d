"""
The Guardian Open Platform content API.
API docs: https://open-platform.theguardian.com/documentation/search
"""
from typing import Any, Optional

from news_aggregator.core.text import parse_timestamp
from news_aggregator.models.domain import CanonicalArticle, SearchParams
from news_aggregator.providers.base import HttpNewsProvider, ProviderRequest, dig
from news_aggregator.providers.http_client import JSONPayload
from news_aggregator.providers.query_builder import QueryBuilder

# Extra fields the content API only returns when asked for
SHOW_FIELDS = "thumbnail,bodyText,byline"


class GuardianProvider(HttpNewsProvider):
    """Adapter for The Guardian's /search endpoint."""

    @property
    def name(self) -> str:
        return "The Guardian"

    @property
    def identifier(self) -> str:
        return "guardian"

    def build_request(self, params: SearchParams) -> ProviderRequest:
        query = (
            QueryBuilder.make()
            .add("api-key", self.config.api_key)
            .add("show-fields", SHOW_FIELDS)
            .add("page-size", params.page_size or self.config.page_size)
            .add("page", params.page or 1)
            .add_if_present("q", params.keyword)
            .add_if_present("section", params.category)
            .add_if_present("from-date", params.from_date)
            .add_if_present("to-date", params.to_date)
        )
        return ProviderRequest(url=self.endpoint("/search"), params=query.to_dict())

    def extract_records(self, payload: JSONPayload, request: ProviderRequest) -> Optional[list[Any]]:
        return dig(payload, "response", "results")

    def transform_record(self, record: dict[str, Any], is_search: bool = False) -> Optional[CanonicalArticle]:
        body = dig(record, "fields", "bodyText")
        return CanonicalArticle(
            title=record.get("webTitle") or "Untitled",
            description=body,
            content=body,
            url=record.get("webUrl"),
            image_url=dig(record, "fields", "thumbnail"),
            author_name=dig(record, "fields", "byline") or "Unknown",
            published_at=parse_timestamp(record.get("webPublicationDate")),
            category=record.get("sectionName"),
        )
