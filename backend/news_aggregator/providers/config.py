"""
Immutable per-provider configuration.
"""
from dataclasses import dataclass
from typing import Optional

from news_aggregator.config import Settings, get_settings


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for one news provider."""
    api_key: str
    base_url: str
    timeout: int = 30
    page_size: int = 50
    language: str = "en"

    @classmethod
    def from_settings(cls, identifier: str, settings: Optional[Settings] = None) -> "ProviderConfig":
        """Build the config for ``identifier`` from application settings."""
        block = (settings or get_settings()).provider(identifier)
        return cls(
            api_key=block.key or "",
            base_url=block.base_url or "",
            timeout=block.timeout,
            page_size=block.page_size,
            language=block.language,
        )

    def is_valid(self) -> bool:
        """True when both an API key and a base URL are configured."""
        return bool(self.api_key) and bool(self.base_url)
