"""
Domain models for the News Aggregator.
These are the core business entities, independent of database/API representation.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class ProviderName(str, Enum):
    """News providers the aggregator knows how to ingest from."""
    NEWSAPI = "newsapi"
    GUARDIAN = "guardian"
    NYTIMES = "nytimes"


# =============================================================================
# Ingestion
# =============================================================================

class CanonicalArticle(BaseModel):
    """Provider-agnostic article produced by a provider's transform step."""

    model_config = ConfigDict(frozen=True)

    title: str = "Untitled"
    description: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None  # Missing url disqualifies the record from storage
    image_url: Optional[str] = None
    author_name: Optional[str] = "Unknown"
    published_at: datetime
    category: Optional[str] = None  # Free-text provider label, not an id


class SearchParams(BaseModel):
    """
    Generic search parameters understood by every provider.

    Accepts the wire names used by callers (``from``, ``to``, ``pageSize``)
    as well as the Python field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    keyword: Optional[str] = None
    category: Optional[str] = None
    from_date: Optional[str] = Field(default=None, alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")
    page: Optional[int] = Field(default=None, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1, alias="pageSize")

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def isoformat_dates(cls, v):
        if isinstance(v, (date, datetime)):
            return v.strftime("%Y-%m-%d")
        return v


@dataclass
class IngestionResult:
    """Result of one fetch-and-store run for a provider."""
    provider: str
    fetched: int = 0
    stored: int = 0
    skipped_invalid: int = 0
    skipped_existing: int = 0
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        return (
            f"{status} {self.provider}: "
            f"fetched={self.fetched}, stored={self.stored}, "
            f"invalid={self.skipped_invalid}, existing={self.skipped_existing}, "
            f"errors={len(self.errors)}, time={self.duration_seconds:.1f}s"
        )


# =============================================================================
# Querying
# =============================================================================

class ArticleFilters(BaseModel):
    """Filters for searching stored articles."""

    model_config = ConfigDict(populate_by_name=True)

    keyword: Optional[str] = Field(default=None, max_length=255)
    from_date: Optional[datetime] = Field(default=None, alias="from")
    to_date: Optional[datetime] = Field(default=None, alias="to")
    sources: list[int] = Field(default_factory=list)
    categories: list[int] = Field(default_factory=list)
    authors: list[int] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=15, ge=1, le=100)


class SourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    api_identifier: str
    is_active: bool


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ArticleOut(BaseModel):
    """Stored article with its related entities."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    source: SourceOut
    category: Optional[CategoryOut] = None
    author: Optional[AuthorOut] = None


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a paginated result."""

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.per_page))


ArticlePage = Page[ArticleOut]


class UserPreferences(BaseModel):
    """A user's feed personalization."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    preferred_sources: list[int] = Field(default_factory=list)
    preferred_categories: list[int] = Field(default_factory=list)
    preferred_authors: list[int] = Field(default_factory=list)


class UserPreferencesUpdate(BaseModel):
    """Partial update of a user's preferences."""
    preferred_sources: Optional[list[int]] = None
    preferred_categories: Optional[list[int]] = None
    preferred_authors: Optional[list[int]] = None
