"""
SQLAlchemy repositories: the storage capability behind ingestion and search.
"""
from news_aggregator.repositories.articles import ArticleRepository
from news_aggregator.repositories.authors import AuthorRepository
from news_aggregator.repositories.categories import CategoryRepository
from news_aggregator.repositories.preferences import UserPreferenceRepository
from news_aggregator.repositories.sources import SourceRepository

__all__ = [
    "ArticleRepository",
    "AuthorRepository",
    "CategoryRepository",
    "SourceRepository",
    "UserPreferenceRepository",
]
