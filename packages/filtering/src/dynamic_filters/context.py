"""QueryContext: protocol for backend-specific query building."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .operators import FilterOperator

Direction = Literal["asc", "desc"]


@runtime_checkable
class QueryContext(Protocol):
    """
    Mutable query-building target the compilers write predicates into.

    Implementations wrap a concrete builder (SQLAlchemy ``Select``, an
    in-memory evaluator, ...).  The filter core never owns the context; it
    mutates the one it is given.  All predicates are ANDed.
    """

    def where(self, field: str, operator: FilterOperator, value: Any) -> None:
        """Direct comparison: eq, neq, gt, lt, gte, lte, regexp, nRegexp."""
        ...

    def where_null(self, field: str, *, negate: bool = False) -> None:
        """``IS NULL`` / ``IS NOT NULL``."""
        ...

    def where_in(
        self, field: str, values: Sequence[Any], *, negate: bool = False
    ) -> None:
        """Set membership."""
        ...

    def where_between(
        self, field: str, low: Any, high: Any, *, negate: bool = False
    ) -> None:
        """Inclusive range."""
        ...

    def where_like(self, field: str, pattern: str, *, negate: bool = False) -> None:
        """SQL ``LIKE`` pattern match; *pattern* already carries its wildcards."""
        ...

    def where_has(
        self, relation: str, build: Callable[[QueryContext], None]
    ) -> None:
        """
        Existential predicate: at least one related row satisfies what
        *build* adds to the nested context it is handed.
        """
        ...

    def order_by(self, field: str, direction: Direction) -> None:
        ...

    def related_entity(self, relation: str) -> Any | None:
        """Entity type on the far side of *relation*, or ``None`` if unknown."""
        ...


__all__ = ["Direction", "QueryContext"]
