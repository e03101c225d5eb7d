"""
In-memory query context.

Records the predicate tree the compilers emit as plain frozen dataclasses
(handy for asserting on structure and for determinism checks) and can
evaluate that tree against rows held in memory: mappings or plain objects,
with relations exposed as a list of related rows or a single related row.
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from .operators import FilterOperator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from .context import Direction, QueryContext


@dataclass(frozen=True)
class Condition:
    field: str
    operator: FilterOperator
    value: Any = None


@dataclass(frozen=True)
class Exists:
    """At least one row reached through ``relation`` satisfies every condition."""

    relation: str
    conditions: tuple[Predicate, ...]


@dataclass(frozen=True)
class Ordering:
    field: str
    direction: Direction


Predicate = Condition | Exists


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _resolve(row: Any, field: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


def _coerce(field_value: Any, condition_value: Any) -> Any:
    """Convert a string condition value to the type of the stored value."""
    if not isinstance(condition_value, str) or field_value is None:
        return condition_value
    try:
        if isinstance(field_value, bool):
            return condition_value.strip().lower() in ("1", "true", "yes", "on")
        if isinstance(field_value, int):
            return int(condition_value)
        if isinstance(field_value, float):
            return float(condition_value)
        if isinstance(field_value, Decimal):
            return Decimal(condition_value)
        if isinstance(field_value, datetime.datetime):
            return datetime.datetime.fromisoformat(condition_value)
        if isinstance(field_value, datetime.date):
            return datetime.date.fromisoformat(condition_value)
    except (ValueError, InvalidOperation):
        return condition_value
    return condition_value


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert a SQL LIKE pattern (``%``, ``_``) to an anchored regex."""
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile(f"^{''.join(parts)}$", re.DOTALL)


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        try:
            return bool(op(field_value, _coerce(field_value, condition_value)))
        except TypeError:
            return False

    return evaluate


def _between(field_value: Any, bounds: Sequence[Any]) -> bool:
    if field_value is None:
        return False
    low, high = (_coerce(field_value, b) for b in bounds)
    try:
        return bool(low <= field_value <= high)
    except TypeError:
        return False


def _in(field_value: Any, values: Sequence[Any]) -> bool:
    return any(field_value == _coerce(field_value, v) for v in values)


def _like(field_value: Any, pattern: Any) -> bool:
    if field_value is None:
        return False
    return bool(_like_to_regex(str(pattern)).match(str(field_value)))


def _regexp(field_value: Any, pattern: Any) -> bool:
    if field_value is None:
        return False
    return re.search(str(pattern), str(field_value)) is not None


_EVALUATORS: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQ: lambda f, v: f == _coerce(f, v),
    FilterOperator.NEQ: lambda f, v: f != _coerce(f, v),
    FilterOperator.GT: _compare(lambda a, b: a > b),
    FilterOperator.LT: _compare(lambda a, b: a < b),
    FilterOperator.GTE: _compare(lambda a, b: a >= b),
    FilterOperator.LTE: _compare(lambda a, b: a <= b),
    FilterOperator.LIKE: _like,
    FilterOperator.NOT_LIKE: lambda f, v: f is not None and not _like(f, v),
    FilterOperator.NULL: lambda f, _v: f is None,
    FilterOperator.NOT_NULL: lambda f, _v: f is not None,
    FilterOperator.IN: _in,
    FilterOperator.NOT_IN: lambda f, v: f is not None and not _in(f, v),
    FilterOperator.BETWEEN: _between,
    FilterOperator.NOT_BETWEEN: lambda f, v: f is not None and not _between(f, v),
    FilterOperator.REGEXP: _regexp,
    FilterOperator.NOT_REGEXP: lambda f, v: f is not None and not _regexp(f, v),
}


def evaluate_predicate(predicate: Predicate, row: Any) -> bool:
    """Evaluate one predicate node against *row*."""
    if isinstance(predicate, Exists):
        related = _resolve(row, predicate.relation)
        if related is None:
            return False
        candidates = related if isinstance(related, list | tuple) else [related]
        return any(
            all(evaluate_predicate(c, candidate) for c in predicate.conditions)
            for candidate in candidates
        )
    evaluator = _EVALUATORS[predicate.operator]
    return evaluator(_resolve(row, predicate.field), predicate.value)


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class InMemoryQueryContext:
    """
    :class:`~dynamic_filters.context.QueryContext` over rows held in memory.

    ``relations`` maps relation names to the related entity type, which the
    relation compiler uses to validate relation fields.
    """

    def __init__(
        self,
        entity_type: Any = None,
        *,
        relations: Mapping[str, Any] | None = None,
    ) -> None:
        self.entity_type = entity_type
        self._relations = dict(relations or {})
        self.predicates: list[Predicate] = []
        self.orderings: list[Ordering] = []

    # -- QueryContext -------------------------------------------------------

    def where(self, field: str, operator: FilterOperator, value: Any) -> None:
        self.predicates.append(Condition(field, FilterOperator(operator), value))

    def where_null(self, field: str, *, negate: bool = False) -> None:
        op = FilterOperator.NOT_NULL if negate else FilterOperator.NULL
        self.predicates.append(Condition(field, op))

    def where_in(
        self, field: str, values: Sequence[Any], *, negate: bool = False
    ) -> None:
        op = FilterOperator.NOT_IN if negate else FilterOperator.IN
        self.predicates.append(Condition(field, op, tuple(values)))

    def where_between(
        self, field: str, low: Any, high: Any, *, negate: bool = False
    ) -> None:
        op = FilterOperator.NOT_BETWEEN if negate else FilterOperator.BETWEEN
        self.predicates.append(Condition(field, op, (low, high)))

    def where_like(self, field: str, pattern: str, *, negate: bool = False) -> None:
        op = FilterOperator.NOT_LIKE if negate else FilterOperator.LIKE
        self.predicates.append(Condition(field, op, pattern))

    def where_has(
        self, relation: str, build: Callable[[QueryContext], None]
    ) -> None:
        inner = InMemoryQueryContext(self._relations.get(relation))
        build(inner)
        self.predicates.append(Exists(relation, tuple(inner.predicates)))

    def order_by(self, field: str, direction: Direction) -> None:
        self.orderings.append(Ordering(field, direction))

    def related_entity(self, relation: str) -> Any | None:
        return self._relations.get(relation)

    # -- inspection / evaluation -------------------------------------------

    def tree(self) -> tuple[tuple[Predicate, ...], tuple[Ordering, ...]]:
        """Immutable snapshot of everything compiled so far."""
        return tuple(self.predicates), tuple(self.orderings)

    def matches(self, row: Any) -> bool:
        return all(evaluate_predicate(p, row) for p in self.predicates)

    def evaluate(self, rows: Iterable[Any]) -> list[Any]:
        """Return the rows matching every predicate, in the compiled order."""
        result = [row for row in rows if self.matches(row)]
        # Apply the last ordering first so earlier keys take precedence.
        for ordering in reversed(self.orderings):
            present = [r for r in result if _resolve(r, ordering.field) is not None]
            missing = [r for r in result if _resolve(r, ordering.field) is None]
            present.sort(
                key=lambda r, f=ordering.field: _resolve(r, f),
                reverse=ordering.direction == "desc",
            )
            result = present + missing
        return result


__all__ = [
    "Condition",
    "Exists",
    "InMemoryQueryContext",
    "Ordering",
    "Predicate",
    "evaluate_predicate",
]
