"""
New York Times Article Search and Top Stories APIs.
API docs: https://developer.nytimes.com/apis

The two endpoints return differently shaped records: Article Search nests
the headline and byline in objects and uses relative image paths, Top
Stories is flat.
"""
from typing import Any, Optional

from news_aggregator.core.text import parse_timestamp
from news_aggregator.models.domain import CanonicalArticle, SearchParams
from news_aggregator.providers.base import HttpNewsProvider, ProviderRequest, dig
from news_aggregator.providers.http_client import JSONPayload
from news_aggregator.providers.query_builder import QueryBuilder

SEARCH_PATH = "/search/v2/articlesearch.json"
TOP_STORIES_PATH = "/topstories/v2/home.json"
SITE_URL = "https://www.nytimes.com/"


def compact_date(value: Optional[str]) -> Optional[str]:
    """NYTimes wants YYYYMMDD: "2024-01-15" -> "20240115"."""
    if not value:
        return None
    return value.replace("-", "")


class NYTimesProvider(HttpNewsProvider):
    """Adapter for the NYTimes search (keyword) and top-stories (no keyword) endpoints."""

    @property
    def name(self) -> str:
        return "New York Times"

    @property
    def identifier(self) -> str:
        return "nytimes"

    def build_request(self, params: SearchParams) -> ProviderRequest:
        is_search = bool(params.keyword)

        query = (
            QueryBuilder.make()
            .add("api-key", self.config.api_key)
            .add_if_present("q", params.keyword)
            .add_if_present("begin_date", compact_date(params.from_date))
            .add_if_present("end_date", compact_date(params.to_date))
        )

        path = SEARCH_PATH if is_search else TOP_STORIES_PATH
        return ProviderRequest(url=self.endpoint(path), params=query.to_dict(), is_search=is_search)

    def extract_records(self, payload: JSONPayload, request: ProviderRequest) -> Optional[list[Any]]:
        if request.is_search:
            return dig(payload, "response", "docs")
        return dig(payload, "results")

    def transform_record(self, record: dict[str, Any], is_search: bool = False) -> Optional[CanonicalArticle]:
        if is_search:
            return CanonicalArticle(
                title=dig(record, "headline", "main") or "Untitled",
                description=record.get("abstract"),
                content=record.get("lead_paragraph"),
                url=record.get("web_url"),
                image_url=self._image_url(record, is_search=True),
                author_name=self._search_author(record),
                published_at=parse_timestamp(record.get("pub_date")),
                category=record.get("section_name"),
            )

        return CanonicalArticle(
            title=record.get("title") or "Untitled",
            description=record.get("abstract"),
            content=record.get("abstract"),
            url=record.get("url"),
            image_url=self._image_url(record, is_search=False),
            author_name=record.get("byline") or "Unknown",
            published_at=parse_timestamp(record.get("published_date")),
            category=record.get("section"),
        )

    def _image_url(self, record: dict[str, Any], is_search: bool) -> Optional[str]:
        multimedia = record.get("multimedia")
        if not multimedia or not isinstance(multimedia, list):
            return None

        image_url = dig(multimedia[0], "url")
        if not image_url:
            return None

        # Search results use paths relative to the site root
        if is_search and not image_url.startswith("http"):
            return SITE_URL + image_url.lstrip("/")

        return image_url

    def _search_author(self, record: dict[str, Any]) -> str:
        original = dig(record, "byline", "original")
        if original:
            return original

        people = dig(record, "byline", "person")
        if isinstance(people, list) and people:
            person = people[0] if isinstance(people[0], dict) else {}
            name = f"{person.get('firstname') or ''} {person.get('lastname') or ''}".strip()
            if name:
                return name

        return "Unknown"
