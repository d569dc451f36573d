"""
Tests for the NewsAPI, Guardian and NYTimes providers.

These tests use mocked HTTP responses to verify request building and
response parsing without requiring network access.
"""

from datetime import datetime, timezone

import httpx
import pytest
from structlog.testing import capture_logs

from news_aggregator.config import NewsAPISettings, Settings
from news_aggregator.models.domain import ProviderName, SearchParams
from news_aggregator.providers import (
    GuardianProvider,
    NewsAPIProvider,
    NYTimesProvider,
    ProviderConfig,
    build_provider,
    build_providers,
)


# Sample NewsAPI /top-headlines response
SAMPLE_NEWSAPI_RESPONSE = {
    "status": "ok",
    "totalResults": 3,
    "articles": [
        {
            "source": {"id": "bbc-news", "name": "BBC News"},
            "author": "Jane Doe",
            "title": "Markets rally on rate cut hopes",
            "description": "Stocks rose sharply.",
            "url": "https://www.bbc.co.uk/news/markets-1",
            "urlToImage": "https://ichef.bbci.co.uk/markets.jpg",
            "publishedAt": "2024-01-15T12:00:00Z",
            "content": "Stocks rose sharply on Monday...",
        },
        {
            "source": {"id": None, "name": "Unknown"},
            "author": None,
            "title": None,
            "description": None,
            "url": "https://example.com/untitled",
            "urlToImage": None,
            "publishedAt": None,
            "content": None,
        },
        {
            "source": {"id": None, "name": "[Removed]"},
            "author": None,
            "title": "[Removed]",
            "description": "[Removed]",
            "url": "https://removed.com",
            "urlToImage": None,
            "publishedAt": "1970-01-01T00:00:00Z",
            "content": "[Removed]",
        },
    ],
}

# Sample Guardian /search response
SAMPLE_GUARDIAN_RESPONSE = {
    "response": {
        "status": "ok",
        "total": 1,
        "results": [
            {
                "id": "world/2024/jan/15/example",
                "sectionName": "World news",
                "webPublicationDate": "2024-01-15T09:30:00Z",
                "webTitle": "Leaders meet for climate summit",
                "webUrl": "https://www.theguardian.com/world/2024/jan/15/example",
                "fields": {
                    "thumbnail": "https://media.guim.co.uk/thumb.jpg",
                    "bodyText": "Leaders from around the world gathered...",
                    "byline": "Alex Reporter",
                },
            }
        ],
    }
}

# Sample NYTimes Article Search response
SAMPLE_NYTIMES_SEARCH_RESPONSE = {
    "status": "OK",
    "response": {
        "docs": [
            {
                "abstract": "A look at the new policy.",
                "web_url": "https://www.nytimes.com/2024/01/15/us/policy.html",
                "lead_paragraph": "WASHINGTON - The administration announced...",
                "multimedia": [{"url": "images/2024/01/15/policy.jpg"}],
                "headline": {"main": "New Policy Announced"},
                "pub_date": "2024-01-15T10:00:00+0000",
                "section_name": "U.S.",
                "byline": {"original": "By Sam Writer", "person": []},
            },
            {
                "abstract": "Second story.",
                "web_url": "https://www.nytimes.com/2024/01/15/us/second.html",
                "multimedia": [],
                "headline": {"main": "Second Story"},
                "pub_date": "2024-01-15T11:00:00+0000",
                "section_name": "U.S.",
                "byline": {"original": None, "person": [{"firstname": "Kim", "lastname": "Lee"}]},
            },
        ]
    },
}

# Sample NYTimes Top Stories response
SAMPLE_NYTIMES_TOP_RESPONSE = {
    "status": "OK",
    "results": [
        {
            "section": "arts",
            "title": "Museum Reopens",
            "abstract": "The museum reopened after renovation.",
            "url": "https://www.nytimes.com/2024/01/15/arts/museum.html",
            "byline": "By Pat Critic",
            "published_date": "2024-01-15T05:00:00-05:00",
            "multimedia": [{"url": "https://static01.nyt.com/museum.jpg"}],
        }
    ],
}


def recording_handler(payload, status=200):
    """Handler answering every request with ``payload``, keeping the requests."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=payload)

    handler.requests = requests
    return handler


class TestNewsAPIProvider:
    """Tests for the NewsAPI adapter."""

    async def test_top_headlines_request(self, mock_http, provider_config):
        handler = recording_handler(SAMPLE_NEWSAPI_RESPONSE)
        provider = NewsAPIProvider(provider_config, mock_http(handler))

        await provider.fetch_articles({"pageSize": 20, "category": "business"})

        request = handler.requests[0]
        assert request.url.path == "/top-headlines"
        assert dict(request.url.params) == {
            "apiKey": "test-key",
            "language": "en",
            "pageSize": "20",
            "page": "1",
            "category": "business",
        }

    async def test_keyword_uses_everything_endpoint(self, mock_http, provider_config):
        handler = recording_handler(SAMPLE_NEWSAPI_RESPONSE)
        provider = NewsAPIProvider(provider_config, mock_http(handler))

        await provider.fetch_articles(SearchParams(keyword="climate", from_date="2024-01-01"))

        params = handler.requests[0].url.params
        assert handler.requests[0].url.path == "/everything"
        assert params["q"] == "climate"
        assert params["from"] == "2024-01-01"
        assert params["pageSize"] == "50"
        assert "to" not in params

    async def test_transform(self, mock_http, provider_config):
        provider = NewsAPIProvider(provider_config, mock_http(recording_handler(SAMPLE_NEWSAPI_RESPONSE)))

        articles = await provider.fetch_articles()

        # The "[Removed]" placeholder record is dropped
        assert len(articles) == 2

        article = articles[0]
        assert article.title == "Markets rally on rate cut hopes"
        assert article.url == "https://www.bbc.co.uk/news/markets-1"
        assert article.image_url == "https://ichef.bbci.co.uk/markets.jpg"
        assert article.author_name == "Jane Doe"
        assert article.published_at == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert article.category is None

        fallback = articles[1]
        assert fallback.title == "Untitled"
        assert fallback.author_name == "Unknown"
        assert fallback.published_at.tzinfo is not None

    async def test_missing_articles_key(self, mock_http, provider_config):
        provider = NewsAPIProvider(provider_config, mock_http(recording_handler({"status": "error"})))

        with capture_logs() as logs:
            assert await provider.fetch_articles() == []

        assert any(
            log["event"] == "NewsAPI returned invalid response format" and log["log_level"] == "error"
            for log in logs
        )

    async def test_articles_not_a_list(self, mock_http, provider_config):
        provider = NewsAPIProvider(provider_config, mock_http(recording_handler({"articles": "nope"})))
        assert await provider.fetch_articles() == []

    async def test_invalid_config_makes_no_request(self, mock_http):
        handler = recording_handler(SAMPLE_NEWSAPI_RESPONSE)
        provider = NewsAPIProvider(ProviderConfig(api_key="", base_url="https://x"), mock_http(handler))

        with capture_logs() as logs:
            assert await provider.fetch_articles() == []

        assert handler.requests == []
        assert logs[0]["event"] == "NewsAPI is not properly configured"
        assert logs[0]["log_level"] == "warning"

    async def test_http_failure_is_empty(self, mock_http, provider_config):
        provider = NewsAPIProvider(provider_config, mock_http(recording_handler({}, status=500)))
        assert await provider.fetch_articles() == []

    async def test_malformed_record_is_empty(self, mock_http, provider_config):
        payload = {"articles": [SAMPLE_NEWSAPI_RESPONSE["articles"][0], "not-a-record"]}
        provider = NewsAPIProvider(provider_config, mock_http(recording_handler(payload)))

        with capture_logs() as logs:
            assert await provider.fetch_articles() == []

        assert any(log["event"] == "NewsAPI exception" for log in logs)


class TestGuardianProvider:
    """Tests for The Guardian adapter."""

    async def test_request(self, mock_http, provider_config):
        handler = recording_handler(SAMPLE_GUARDIAN_RESPONSE)
        provider = GuardianProvider(provider_config, mock_http(handler))

        await provider.fetch_articles(
            {"keyword": "climate", "category": "world", "from": "2024-01-01", "to": "2024-01-31"}
        )

        request = handler.requests[0]
        assert request.url.path == "/search"
        assert dict(request.url.params) == {
            "api-key": "test-key",
            "show-fields": "thumbnail,bodyText,byline",
            "page-size": "50",
            "page": "1",
            "q": "climate",
            "section": "world",
            "from-date": "2024-01-01",
            "to-date": "2024-01-31",
        }

    async def test_transform(self, mock_http, provider_config):
        provider = GuardianProvider(provider_config, mock_http(recording_handler(SAMPLE_GUARDIAN_RESPONSE)))

        articles = await provider.fetch_articles()

        assert len(articles) == 1
        article = articles[0]
        assert article.title == "Leaders meet for climate summit"
        assert article.description == "Leaders from around the world gathered..."
        assert article.content == article.description
        assert article.url == "https://www.theguardian.com/world/2024/jan/15/example"
        assert article.image_url == "https://media.guim.co.uk/thumb.jpg"
        assert article.author_name == "Alex Reporter"
        assert article.category == "World news"

    async def test_missing_fields(self, mock_http, provider_config):
        payload = {"response": {"results": [{"webUrl": "https://g.example/1"}]}}
        provider = GuardianProvider(provider_config, mock_http(recording_handler(payload)))

        article = (await provider.fetch_articles())[0]

        assert article.title == "Untitled"
        assert article.author_name == "Unknown"
        assert article.image_url is None
        assert article.category is None

    async def test_missing_results(self, mock_http, provider_config):
        provider = GuardianProvider(provider_config, mock_http(recording_handler({"response": {}})))
        assert await provider.fetch_articles() == []


class TestNYTimesProvider:
    """Tests for the NYTimes adapter."""

    async def test_search_request(self, mock_http, provider_config):
        handler = recording_handler(SAMPLE_NYTIMES_SEARCH_RESPONSE)
        provider = NYTimesProvider(provider_config, mock_http(handler))

        await provider.fetch_articles({"keyword": "policy", "from": "2024-01-01", "to": "2024-01-31"})

        request = handler.requests[0]
        assert request.url.path == "/search/v2/articlesearch.json"
        assert dict(request.url.params) == {
            "api-key": "test-key",
            "q": "policy",
            "begin_date": "20240101",
            "end_date": "20240131",
        }

    async def test_search_transform(self, mock_http, provider_config):
        provider = NYTimesProvider(provider_config, mock_http(recording_handler(SAMPLE_NYTIMES_SEARCH_RESPONSE)))

        articles = await provider.fetch_articles({"keyword": "policy"})

        assert len(articles) == 2
        first, second = articles
        assert first.title == "New Policy Announced"
        assert first.description == "A look at the new policy."
        assert first.content == "WASHINGTON - The administration announced..."
        assert first.image_url == "https://www.nytimes.com/images/2024/01/15/policy.jpg"
        assert first.author_name == "By Sam Writer"
        assert first.category == "U.S."
        assert first.published_at == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

        assert second.author_name == "Kim Lee"
        assert second.image_url is None

    async def test_top_stories(self, mock_http, provider_config):
        handler = recording_handler(SAMPLE_NYTIMES_TOP_RESPONSE)
        provider = NYTimesProvider(provider_config, mock_http(handler))

        articles = await provider.fetch_articles()

        assert handler.requests[0].url.path == "/topstories/v2/home.json"
        assert dict(handler.requests[0].url.params) == {"api-key": "test-key"}

        article = articles[0]
        assert article.title == "Museum Reopens"
        assert article.content == "The museum reopened after renovation."
        assert article.image_url == "https://static01.nyt.com/museum.jpg"
        assert article.author_name == "By Pat Critic"
        assert article.category == "arts"
        assert article.published_at == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    async def test_top_stories_shape_mismatch(self, mock_http, provider_config):
        # A search-shaped body from the top-stories endpoint has no "results"
        provider = NYTimesProvider(provider_config, mock_http(recording_handler(SAMPLE_NYTIMES_SEARCH_RESPONSE)))
        assert await provider.fetch_articles() == []


class TestProviderRegistry:
    def test_build_provider_from_settings(self):
        settings = Settings(_env_file=None, newsapi=NewsAPISettings(_env_file=None, key="abc"))
        provider = build_provider("newsapi", settings=settings)

        assert isinstance(provider, NewsAPIProvider)
        assert provider.config.api_key == "abc"
        assert provider.config.base_url == "https://newsapi.org/v2"

    def test_build_all_share_client(self):
        providers = build_providers(settings=Settings(_env_file=None))

        assert [p.identifier for p in providers] == [n.value for n in ProviderName]
        assert len({id(p.http) for p in providers}) == 1

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_provider("reuters", settings=Settings(_env_file=None))
