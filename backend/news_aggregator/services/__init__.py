"""
Services for the News Aggregator.
"""
from news_aggregator.services.articles import ArticleService
from news_aggregator.services.catalog import CatalogService
from news_aggregator.services.ingestion import ArticleIngestionService
from news_aggregator.services.preferences import PreferenceService

__all__ = [
    "ArticleIngestionService",
    "ArticleService",
    "CatalogService",
    "PreferenceService",
]
