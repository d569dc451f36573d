"""
Fluent accumulator for provider query-string parameters.
"""
from typing import Any


def _is_present(value: Any) -> bool:
    # "0" counts as empty alongside None, "", 0, False and empty collections
    if value is None or value == "0":
        return False
    return bool(value)


class QueryBuilder:
    """
    Collects key/value query parameters in insertion order.

    Every mutator returns the builder so calls can be chained:

        QueryBuilder.make().add("apiKey", key).add_if_present("q", keyword).to_dict()
    """

    def __init__(self) -> None:
        self._params: dict[str, Any] = {}

    @classmethod
    def make(cls) -> "QueryBuilder":
        return cls()

    def add(self, key: str, value: Any) -> "QueryBuilder":
        """Set a parameter unconditionally, overwriting any earlier value."""
        self._params[key] = value
        return self

    def add_if_present(self, key: str, value: Any) -> "QueryBuilder":
        """Set a parameter only when ``value`` is non-empty."""
        if _is_present(value):
            self._params[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        return dict(self._params)
