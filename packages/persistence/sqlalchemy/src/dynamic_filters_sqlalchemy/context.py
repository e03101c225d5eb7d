"""
SQLAlchemy query context.

Collects boolean clauses against one mapped model.  Relation predicates are
compiled into a nested context on the related model and wrapped in
``EXISTS`` via ``relationship.any()`` (collections) or ``.has()``
(scalar relations)::

    context = SQLAlchemyQueryContext(Product)
    DynamicFilter().apply(context, Product, params)
    rows = (await session.execute(context.statement)).scalars().all()
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, asc, desc, inspect, select, true
from sqlalchemy.orm import RelationshipProperty

from dynamic_filters.operators import FilterOperator

from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import ColumnElement, Select

    from dynamic_filters.context import Direction, QueryContext

    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def coerce_value(column: Any, value: Any) -> Any:
    """Convert a string *value* to the Python type of *column*, if known."""
    if not isinstance(value, str):
        return value
    try:
        python_type = column.type.python_type
    except (AttributeError, NotImplementedError):
        return value
    try:
        if python_type is bool:
            return value.strip().lower() in _TRUE_STRINGS
        if python_type is int:
            return int(value)
        if python_type is float:
            return float(value)
        if python_type is Decimal:
            return Decimal(value)
        if python_type is datetime.datetime:
            return datetime.datetime.fromisoformat(value)
        if python_type is datetime.date:
            return datetime.date.fromisoformat(value)
    except (ValueError, InvalidOperation):
        logger.debug("Could not coerce %r to %s; binding as-is", value, python_type)
    return value


class SQLAlchemyQueryContext:
    """:class:`~dynamic_filters.context.QueryContext` over a mapped SQLAlchemy model."""

    def __init__(
        self,
        model: type[Any],
        statement: Select[Any] | None = None,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self._base = statement if statement is not None else select(model)
        self._registry = registry or DEFAULT_SQLA_REGISTRY
        self.clauses: list[ColumnElement[bool]] = []
        self.order_clauses: list[Any] = []

    # -- QueryContext -------------------------------------------------------

    def where(self, field: str, operator: FilterOperator, value: Any) -> None:
        column = self.column(field)
        self._add(operator, column, coerce_value(column, value))

    def where_null(self, field: str, *, negate: bool = False) -> None:
        op = FilterOperator.NOT_NULL if negate else FilterOperator.NULL
        self._add(op, self.column(field), None)

    def where_in(
        self, field: str, values: Sequence[Any], *, negate: bool = False
    ) -> None:
        column = self.column(field)
        op = FilterOperator.NOT_IN if negate else FilterOperator.IN
        self._add(op, column, [coerce_value(column, v) for v in values])

    def where_between(
        self, field: str, low: Any, high: Any, *, negate: bool = False
    ) -> None:
        column = self.column(field)
        op = FilterOperator.NOT_BETWEEN if negate else FilterOperator.BETWEEN
        bounds = (coerce_value(column, low), coerce_value(column, high))
        self._add(op, column, bounds)

    def where_like(self, field: str, pattern: str, *, negate: bool = False) -> None:
        op = FilterOperator.NOT_LIKE if negate else FilterOperator.LIKE
        self._add(op, self.column(field), pattern)

    def where_has(
        self, relation: str, build: Callable[[QueryContext], None]
    ) -> None:
        rel_attr = self._relationship(relation)
        target_model = rel_attr.property.mapper.class_
        inner = SQLAlchemyQueryContext(target_model, registry=self._registry)
        build(inner)
        condition = inner.condition()
        if rel_attr.property.uselist:
            clause = rel_attr.any(condition)
        else:
            clause = rel_attr.has(condition)
        self.clauses.append(cast("ColumnElement[bool]", clause))

    def order_by(self, field: str, direction: Direction) -> None:
        column = self.column(field)
        self.order_clauses.append(desc(column) if direction == "desc" else asc(column))

    def related_entity(self, relation: str) -> Any | None:
        rel = inspect(self.model).relationships.get(relation)
        return rel.mapper.class_ if rel is not None else None

    # -- SQLAlchemy-specific -----------------------------------------------

    def where_clause(self, *clauses: ColumnElement[bool]) -> None:
        """Add raw SQLAlchemy clauses (for custom filter handlers)."""
        self.clauses.extend(clauses)

    def column(self, field: str) -> Any:
        column = getattr(self.model, field, None)
        if column is None or isinstance(
            getattr(column, "property", None), RelationshipProperty
        ):
            raise AttributeError(f"Model {self.model} has no column {field}")
        return column

    def condition(self) -> ColumnElement[bool]:
        """All collected clauses ANDed together."""
        if not self.clauses:
            return true()
        if len(self.clauses) == 1:
            return self.clauses[0]
        return and_(*self.clauses)

    @property
    def statement(self) -> Select[Any]:
        """The base statement with every collected clause and ordering applied."""
        stmt = self._base
        if self.clauses:
            stmt = stmt.where(*self.clauses)
        if self.order_clauses:
            stmt = stmt.order_by(*self.order_clauses)
        return stmt

    def _relationship(self, relation: str) -> Any:
        rel_attr = getattr(self.model, relation, None)
        if rel_attr is None or not isinstance(
            getattr(rel_attr, "property", None), RelationshipProperty
        ):
            raise AttributeError(f"Model {self.model} has no relationship {relation}")
        return rel_attr

    def _add(self, operator: FilterOperator, column: Any, value: Any) -> None:
        self.clauses.append(self._registry.apply(operator, column, value))


__all__ = ["SQLAlchemyQueryContext", "coerce_value"]
