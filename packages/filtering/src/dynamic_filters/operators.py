"""
Filter operator table.

Maps the short operator tokens accepted in ``field:operator`` keys to their
value shape and SQL form.  The table is built once at import time and is
exposed read-only, so it can be shared by concurrent requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class FilterOperator(str, Enum):
    """Operator tokens understood by the filter language."""

    # Comparison
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"

    # Pattern
    LIKE = "like"
    NOT_LIKE = "nLike"

    # Nullability
    NULL = "null"
    NOT_NULL = "nNull"

    # Set membership
    IN = "in"
    NOT_IN = "nIn"

    # Range
    BETWEEN = "between"
    NOT_BETWEEN = "nBetween"

    # Regular expression
    REGEXP = "regexp"
    NOT_REGEXP = "nRegexp"


class Arity(str, Enum):
    """How an operator consumes the caller-supplied value."""

    UNARY = "unary"
    BINARY = "binary"
    LIST = "list"
    RANGE = "range"


@dataclass(frozen=True)
class OperatorSpec:
    token: FilterOperator
    arity: Arity
    sql_form: str
    negated: bool = False


_SPECS = (
    OperatorSpec(FilterOperator.EQ, Arity.BINARY, "="),
    OperatorSpec(FilterOperator.NEQ, Arity.BINARY, "!="),
    OperatorSpec(FilterOperator.GT, Arity.BINARY, ">"),
    OperatorSpec(FilterOperator.LT, Arity.BINARY, "<"),
    OperatorSpec(FilterOperator.GTE, Arity.BINARY, ">="),
    OperatorSpec(FilterOperator.LTE, Arity.BINARY, "<="),
    OperatorSpec(FilterOperator.LIKE, Arity.BINARY, "LIKE"),
    OperatorSpec(FilterOperator.NOT_LIKE, Arity.BINARY, "NOT LIKE", negated=True),
    OperatorSpec(FilterOperator.NULL, Arity.UNARY, "IS NULL"),
    OperatorSpec(FilterOperator.NOT_NULL, Arity.UNARY, "IS NOT NULL", negated=True),
    OperatorSpec(FilterOperator.IN, Arity.LIST, "IN"),
    OperatorSpec(FilterOperator.NOT_IN, Arity.LIST, "NOT IN", negated=True),
    OperatorSpec(FilterOperator.BETWEEN, Arity.RANGE, "BETWEEN"),
    OperatorSpec(FilterOperator.NOT_BETWEEN, Arity.RANGE, "NOT BETWEEN", negated=True),
    OperatorSpec(FilterOperator.REGEXP, Arity.BINARY, "REGEXP"),
    OperatorSpec(FilterOperator.NOT_REGEXP, Arity.BINARY, "NOT REGEXP", negated=True),
)

OPERATOR_TABLE: Mapping[str, OperatorSpec] = MappingProxyType(
    {spec.token.value: spec for spec in _SPECS}
)


def lookup_operator(token: str | None) -> OperatorSpec | None:
    """Return the spec for *token*, or ``None`` when it is not a known operator.

    Tokens are case-sensitive: ``nLike`` is an operator, ``nlike`` is not.
    """
    if token is None:
        return None
    return OPERATOR_TABLE.get(token)


__all__ = [
    "OPERATOR_TABLE",
    "Arity",
    "FilterOperator",
    "OperatorSpec",
    "lookup_operator",
]
