"""Tests for the operator table."""

from __future__ import annotations

import pytest

from dynamic_filters.operators import (
    OPERATOR_TABLE,
    Arity,
    FilterOperator,
    lookup_operator,
)


def test_table_has_exactly_sixteen_tokens() -> None:
    assert set(OPERATOR_TABLE) == {
        "eq",
        "neq",
        "gt",
        "lt",
        "gte",
        "lte",
        "like",
        "nLike",
        "null",
        "nNull",
        "in",
        "nIn",
        "between",
        "nBetween",
        "regexp",
        "nRegexp",
    }


@pytest.mark.parametrize(
    ("token", "arity", "negated"),
    [
        ("eq", Arity.BINARY, False),
        ("nLike", Arity.BINARY, True),
        ("null", Arity.UNARY, False),
        ("nNull", Arity.UNARY, True),
        ("in", Arity.LIST, False),
        ("nBetween", Arity.RANGE, True),
    ],
)
def test_lookup_shapes(token: str, arity: Arity, negated: bool) -> None:
    spec = lookup_operator(token)
    assert spec is not None
    assert spec.token is FilterOperator(token)
    assert spec.arity is arity
    assert spec.negated is negated


def test_lookup_is_case_sensitive() -> None:
    assert lookup_operator("nlike") is None
    assert lookup_operator("EQ") is None


def test_lookup_unknown_returns_none() -> None:
    assert lookup_operator("approx") is None
    assert lookup_operator(None) is None


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        OPERATOR_TABLE["approx"] = OPERATOR_TABLE["eq"]  # type: ignore[index]


def test_sql_forms() -> None:
    assert OPERATOR_TABLE["neq"].sql_form == "!="
    assert OPERATOR_TABLE["nIn"].sql_form == "NOT IN"
    assert OPERATOR_TABLE["regexp"].sql_form == "REGEXP"
