"""
Tests for the provider query-string builder.
"""

import pytest

from news_aggregator.providers.query_builder import QueryBuilder


class TestQueryBuilder:
    def test_add_sets_unconditionally(self):
        params = QueryBuilder.make().add("page", 0).add("q", "").to_dict()
        assert params == {"page": 0, "q": ""}

    def test_add_overwrites(self):
        params = QueryBuilder.make().add("page", 1).add("page", 2).to_dict()
        assert params == {"page": 2}

    @pytest.mark.parametrize("value", [None, "", [], {}, 0, "0", False])
    def test_add_if_present_skips_empty_values(self, value):
        assert QueryBuilder.make().add_if_present("q", value).to_dict() == {}

    def test_add_if_present_keeps_values(self):
        params = QueryBuilder.make().add_if_present("q", "climate").add_if_present("page", 2).to_dict()
        assert params == {"q": "climate", "page": 2}

    def test_insertion_order_preserved(self):
        params = (
            QueryBuilder.make()
            .add("apiKey", "k")
            .add_if_present("q", "x")
            .add("page", 1)
            .to_dict()
        )
        assert list(params) == ["apiKey", "q", "page"]

    def test_to_dict_returns_copy(self):
        builder = QueryBuilder.make().add("q", "x")
        builder.to_dict()["q"] = "changed"
        assert builder.to_dict() == {"q": "x"}
