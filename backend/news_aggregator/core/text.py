"""
Text normalization helpers shared by providers and the ingestion service.
"""

import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def slugify(label: str) -> str:
    """
    Derive a stable lookup key from a free-text label.

    Lowercases, folds accents to ASCII, and joins alphanumeric runs with
    single hyphens, so "U.S. News", "u-s-news" and "U S  News" all map to
    "u-s-news".
    """
    folded = unicodedata.normalize("NFKD", label).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.lower()).strip("-")


def author_key(name: str) -> str:
    """Case-insensitive lookup key for an author name."""
    return name.strip().lower()


def parse_timestamp(value: Any, default: Optional[datetime] = None) -> datetime:
    """
    Parse a provider timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings ("2024-01-15T12:00:00Z",
    "2024-01-15T12:00:00+0000", "2024-01-15") and datetimes. Anything else
    falls back to ``default`` or the current time.
    """
    fallback = default or datetime.now(timezone.utc)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip().replace("Z", "+00:00")
        text = _COMPACT_OFFSET.sub(r"\1:\2", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return fallback
    else:
        return fallback

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def truncate(text: str, limit: int = 500) -> str:
    """Cap ``text`` at ``limit`` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
