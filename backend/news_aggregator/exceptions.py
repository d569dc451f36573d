"""
Exception hierarchy.

Messages are safe to show to API consumers; the underlying cause is kept on
``__cause__`` for logs.
"""

from typing import Optional, Union


class NewsAggregatorError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NewsProviderError(NewsAggregatorError):
    """A provider could not deliver usable data."""

    def __init__(self, message: str, status_code: int = 500, provider: Optional[str] = None):
        super().__init__(message, status_code)
        self.provider = provider

    @classmethod
    def invalid_response(cls, provider: str) -> "NewsProviderError":
        return cls("Unable to process news data. Please try again later.", 500, provider)


class RepositoryError(NewsAggregatorError):
    """A storage operation failed."""

    @classmethod
    def query_failed(cls, repository: str, method: str) -> "RepositoryError":
        return cls("Unable to retrieve data. Please try again later.", 500)

    @classmethod
    def not_found(cls, model: str, id: Union[int, str]) -> "RepositoryError":
        return cls("The requested resource was not found.", 404)

    @classmethod
    def create_failed(cls, model: str) -> "RepositoryError":
        return cls("Unable to save data. Please try again.", 500)

    @classmethod
    def update_failed(cls, model: str, id: Union[int, str]) -> "RepositoryError":
        return cls("Unable to update resource. Please try again.", 500)

    @classmethod
    def delete_failed(cls, model: str, id: Union[int, str]) -> "RepositoryError":
        return cls("Unable to delete resource. Please try again.", 500)


class ServiceError(NewsAggregatorError):
    """A service-level operation failed or was rejected."""

    @classmethod
    def operation_failed(cls, operation: str) -> "ServiceError":
        return cls("Operation failed. Please try again later.", 500)

    @classmethod
    def invalid_data(cls, message: str) -> "ServiceError":
        return cls(message, 422)

    @classmethod
    def not_found(cls, message: str) -> "ServiceError":
        return cls(message, 404)
