"""Tests for FilterRequest validation and query-string decoding."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dynamic_filters import FilterRequest, InvalidRequestError


def test_defaults() -> None:
    request = FilterRequest.from_params(None)
    assert request.filters == {}
    assert request.relation_filters == {}
    assert request.custom_filters == {}
    assert request.order_by is None
    assert request.page == 1
    assert request.per_page == 10
    assert request.updated_data == {}


def test_wire_aliases_and_snake_case() -> None:
    by_alias = FilterRequest.from_params(
        {"relationFilters": {"a.b:eq": 1}, "orderBy": "-x", "perPage": 5}
    )
    by_name = FilterRequest(relation_filters={"a.b:eq": 1}, order_by="-x", per_page=5)
    assert by_alias == by_name


def test_existing_request_is_returned_as_is() -> None:
    request = FilterRequest()
    assert FilterRequest.from_params(request) is request


def test_unknown_top_level_keys_are_ignored() -> None:
    request = FilterRequest.from_params({"filters": {}, "utm_source": "mail"})
    assert request.filters == {}


def test_invalid_pagination_reports_location() -> None:
    with pytest.raises(InvalidRequestError) as exc:
        FilterRequest.from_params({"perPage": 0})
    assert "perPage" in exc.value.errors
    assert exc.value.to_dict()["error"] == "VALIDATION_ERROR"


def test_request_is_immutable() -> None:
    request = FilterRequest()
    with pytest.raises(ValidationError):
        request.page = 2  # type: ignore[misc]


def test_from_query_string() -> None:
    request = FilterRequest.from_query_string(
        "?filters[price:gte]=500&filters[category:in]=a,b"
        "&relationFilters[provider.name:like]=mo"
        "&customFilters[tags][]=x&customFilters[tags][]=y"
        "&orderBy=-price&page=2&perPage=25"
    )
    assert request.filters == {"price:gte": "500", "category:in": "a,b"}
    assert request.relation_filters == {"provider.name:like": "mo"}
    assert request.custom_filters == {"tags": ["x", "y"]}
    assert request.order_by == "-price"
    assert request.page == 2
    assert request.per_page == 25


def test_from_query_params_mapping() -> None:
    request = FilterRequest.from_query_params(
        {"filters[name:eq]": "TV", "updatedData[price]": "10"}
    )
    assert request.filters == {"name:eq": "TV"}
    assert request.updated_data == {"price": "10"}


def test_to_query_string_with_override() -> None:
    request = FilterRequest(filters={"price:gte": "500"}, order_by="-price")
    query_string = request.to_query_string(page=3)
    assert "page=3" in query_string
    decoded = FilterRequest.from_query_string(query_string)
    assert decoded.filters == {"price:gte": "500"}
    assert decoded.order_by == "-price"
    assert decoded.page == 3
