"""Tests for the in-memory query context evaluator."""

from __future__ import annotations

import datetime
from types import SimpleNamespace

from dynamic_filters import FilterOperator, InMemoryQueryContext, QueryContext
from dynamic_filters.memory import Condition, Exists, evaluate_predicate


def test_satisfies_query_context_protocol() -> None:
    assert isinstance(InMemoryQueryContext(), QueryContext)


def test_string_values_are_coerced_to_row_types() -> None:
    row = {"price": 500, "ratio": 0.5, "active": True, "day": datetime.date(2024, 5, 1)}
    assert evaluate_predicate(Condition("price", FilterOperator.GTE, "500"), row)
    assert evaluate_predicate(Condition("ratio", FilterOperator.LT, "0.75"), row)
    assert evaluate_predicate(Condition("active", FilterOperator.EQ, "true"), row)
    assert evaluate_predicate(
        Condition("day", FilterOperator.BETWEEN, ("2024-01-01", "2024-12-31")), row
    )


def test_comparisons_with_missing_values_never_match() -> None:
    row = {"price": None}
    assert not evaluate_predicate(Condition("price", FilterOperator.GT, "1"), row)
    assert not evaluate_predicate(Condition("price", FilterOperator.NOT_IN, ("1",)), row)
    assert evaluate_predicate(Condition("price", FilterOperator.NULL), row)


def test_like_and_regexp() -> None:
    row = {"name": "Camera_X"}
    assert evaluate_predicate(Condition("name", FilterOperator.LIKE, "%era%"), row)
    assert evaluate_predicate(Condition("name", FilterOperator.LIKE, "Camer_%"), row)
    assert evaluate_predicate(Condition("name", FilterOperator.NOT_LIKE, "%tv%"), row)
    assert evaluate_predicate(Condition("name", FilterOperator.REGEXP, "^Cam"), row)
    assert evaluate_predicate(Condition("name", FilterOperator.NOT_REGEXP, "\\d"), row)


def test_exists_over_single_related_object() -> None:
    row = SimpleNamespace(provider=SimpleNamespace(name="Globex"))
    predicate = Exists("provider", (Condition("name", FilterOperator.EQ, "Globex"),))
    assert evaluate_predicate(predicate, row)
    assert not evaluate_predicate(predicate, SimpleNamespace(provider=None))


def test_where_has_records_nested_predicates() -> None:
    context = InMemoryQueryContext(relations={"reviews": object})
    context.where_has(
        "reviews", lambda inner: inner.where_in("rating", ["4", "5"], negate=False)
    )
    assert context.predicates == [
        Exists("reviews", (Condition("rating", FilterOperator.IN, ("4", "5")),))
    ]
    assert context.related_entity("reviews") is object
    assert context.related_entity("missing") is None


def test_ordering_puts_missing_values_last() -> None:
    rows = [{"id": 1, "price": None}, {"id": 2, "price": 5}, {"id": 3, "price": 9}]
    context = InMemoryQueryContext()
    context.order_by("price", "desc")
    assert [r["id"] for r in context.evaluate(rows)] == [3, 2, 1]
