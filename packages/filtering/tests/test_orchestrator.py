"""End-to-end tests for DynamicFilter."""

from __future__ import annotations

import logging

import pytest

from dynamic_filters import (
    DisallowedFieldError,
    DisallowedOrderFieldError,
    DynamicFilter,
    FilterOperator,
    FilterRequest,
    InvalidRequestError,
)
from dynamic_filters.memory import Condition, Exists, Ordering

CATALOG = [
    {"id": 1, "category": "Electronics", "price": 700, "name": "TV", "quantity": 3,
     "provider": {"name": "Cosmo Supply"}},
    {"id": 2, "category": "Electronics", "price": 300, "name": "Radio", "quantity": 9,
     "provider": {"name": "Globex"}},
    {"id": 3, "category": "Books", "price": 900, "name": "Atlas", "quantity": 1,
     "provider": {"name": "Cosmo Supply"}},
    {"id": 4, "category": "Electronics", "price": 500, "name": "Camera", "quantity": 2,
     "provider": None},
]


def test_end_to_end_scenario(dynamic_filter, context, product) -> None:
    result = dynamic_filter.apply(
        context,
        product,
        {"filters": {"category:eq": "Electronics", "price:gte": "500"}},
    )
    assert result is context
    assert context.predicates == [
        Condition("category", FilterOperator.EQ, "Electronics"),
        Condition("price", FilterOperator.GTE, "500"),
    ]
    assert [r["id"] for r in context.evaluate(CATALOG)] == [1, 4]


def test_all_steps_in_order(dynamic_filter, context, product) -> None:
    dynamic_filter.apply(
        context,
        product,
        {
            "filters": {"price:between": "100,800"},
            "relationFilters": {"provider.name:like": "mo"},
            "customFilters": {"stock": "low"},
            "orderBy": "-price",
        },
    )
    assert context.predicates == [
        Condition("price", FilterOperator.BETWEEN, ("100", "800")),
        Exists("provider", (Condition("name", FilterOperator.LIKE, "%mo%"),)),
        Condition("quantity", FilterOperator.LT, 5),
    ]
    assert context.orderings == [Ordering("price", "desc")]
    assert [r["id"] for r in context.evaluate(CATALOG)] == [1]


def test_ordering_is_applied_to_results(dynamic_filter, context, product) -> None:
    dynamic_filter.apply(
        context, product, {"filters": {"category:eq": "Electronics"}, "orderBy": "price"}
    )
    assert [r["id"] for r in context.evaluate(CATALOG)] == [2, 4, 1]


def test_compilation_is_deterministic(dynamic_filter, make_context, product) -> None:
    request = FilterRequest.from_params(
        {
            "filters": {"category:in": "a,b", "price:gte": "10", "name:nNull": ""},
            "relationFilters": {"reviews.rating:gt": "3"},
            "orderBy": "-name",
        }
    )
    first = dynamic_filter.apply(make_context(), product, request)
    second = dynamic_filter.apply(make_context(), product, request)
    assert first.tree() == second.tree()


def test_disallowed_field_aborts_before_ordering(dynamic_filter, context, product) -> None:
    with pytest.raises(DisallowedFieldError) as exc:
        dynamic_filter.apply(
            context,
            product,
            {"filters": {"secret:eq": "x"}, "orderBy": "price"},
        )
    assert exc.value.key == "secret"
    assert context.orderings == []


def test_password_is_never_filterable(dynamic_filter, context, product) -> None:
    with pytest.raises(DisallowedFieldError):
        dynamic_filter.apply(context, product, {"filters": {"password:eq": "hunter2"}})


def test_ignore_policy_leaves_tree_unchanged(lenient_filter, context, product, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dynamic_filters"):
        lenient_filter.apply(
            context,
            product,
            {
                "filters": {"secret:eq": "x", "price:gt": "1"},
                "relationFilters": {"owner.name:eq": "x"},
                "customFilters": {"color": "red"},
                "orderBy": "category",
            },
        )
    assert context.predicates == [Condition("price", FilterOperator.GT, "1")]
    assert context.orderings == []
    assert len(caplog.records) == 4


def test_unknown_operator_and_malformed_key_are_no_ops(
    dynamic_filter, context, product
) -> None:
    dynamic_filter.apply(
        context, product, {"filters": {"price:approx": "1", "price": "2", ":eq": "3"}}
    )
    assert context.predicates == []


def test_disallowed_order_is_rejected(dynamic_filter, context, product) -> None:
    with pytest.raises(DisallowedOrderFieldError):
        dynamic_filter.apply(context, product, {"orderBy": "-quantity"})


def test_empty_request_is_a_no_op(dynamic_filter, context, product) -> None:
    dynamic_filter.apply(context, product, None)
    assert context.tree() == ((), ())


def test_invalid_request_shape(dynamic_filter, context, product) -> None:
    with pytest.raises(InvalidRequestError):
        dynamic_filter.apply(context, product, {"filters": "price:gte=5"})


def test_default_registry_is_empty(product, context) -> None:
    dynamic_filter = DynamicFilter()
    assert product not in dynamic_filter.custom_filters
    dynamic_filter.apply(context, product, {"customFilters": {"stock": "low"}})
    assert context.predicates == []
