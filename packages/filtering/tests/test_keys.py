"""Tests for filter-key parsing."""

from __future__ import annotations

import pytest

from dynamic_filters.keys import FilterKey, parse_filter_key, parse_relation_key


def test_parse_field_and_operator() -> None:
    assert parse_filter_key("price:gte") == FilterKey("price", "gte")


@pytest.mark.parametrize("raw", ["price", ":gte", "price:", ""])
def test_incomplete_keys(raw: str) -> None:
    key = parse_filter_key(raw)
    assert key.field is None
    assert key.operator is None
    assert not key.is_complete


def test_splits_on_first_separator_only() -> None:
    key = parse_filter_key("created_at:between:x")
    assert key.field == "created_at"
    assert key.operator == "between:x"


def test_parse_relation_key() -> None:
    key = parse_relation_key("provider.name:like")
    assert key == FilterKey("name", "like", relation="provider")
    assert key.is_complete


def test_relation_key_without_dot_is_not_a_relation() -> None:
    assert parse_relation_key("name:like") is None
    assert parse_relation_key(".name:like") is None
    assert parse_relation_key("provider.") is None


def test_relation_key_without_operator_is_incomplete() -> None:
    key = parse_relation_key("provider.name")
    assert key is not None
    assert key.relation == "provider"
    assert not key.is_complete
