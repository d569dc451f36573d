"""
Domain and database models.
"""
from news_aggregator.models.database import (
    Base,
    Database,
    DBArticle,
    DBAuthor,
    DBCategory,
    DBSource,
    DBUserPreferences,
)
from news_aggregator.models.domain import (
    ArticleFilters,
    ArticleOut,
    ArticlePage,
    CanonicalArticle,
    IngestionResult,
    Page,
    ProviderName,
    SearchParams,
    UserPreferences,
    UserPreferencesUpdate,
)

__all__ = [
    "Base",
    "Database",
    "DBArticle",
    "DBAuthor",
    "DBCategory",
    "DBSource",
    "DBUserPreferences",
    "ArticleFilters",
    "ArticleOut",
    "ArticlePage",
    "CanonicalArticle",
    "IngestionResult",
    "Page",
    "ProviderName",
    "SearchParams",
    "UserPreferences",
    "UserPreferencesUpdate",
]
