"""
SQLAlchemy operator compilation strategy.

Provides the ``SQLAlchemyOperator`` interface and a registry keyed by
:class:`~dynamic_filters.operators.FilterOperator`.  One strategy per
operator token; the query context looks the token up and applies it to a
mapped column.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from dynamic_filters.operators import FilterOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

logger = logging.getLogger(__name__)


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling one filter operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(
        self,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        """
        Build a SQLAlchemy filter clause.

        Args:
            column: A SQLAlchemy column or instrumented attribute.
            value: The prepared condition value (a list for ``in``/``nIn``,
                a ``(low, high)`` pair for ``between``/``nBetween``,
                ``None`` for the null checks).

        Returns:
            A SQLAlchemy boolean expression.
        """
        ...


class SQLAlchemyOperatorRegistry:
    """Registry of ``SQLAlchemyOperator`` instances keyed by :class:`FilterOperator`."""

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, SQLAlchemyOperator] = {}

    def register(self, operator: SQLAlchemyOperator) -> None:
        if operator.name in self._operators:
            logger.debug("Replacing SQLAlchemy operator for %s", operator.name.value)
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: FilterOperator | str) -> SQLAlchemyOperator | None:
        try:
            return self._operators.get(FilterOperator(name))
        except ValueError:
            return None

    def apply(
        self,
        name: FilterOperator | str,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for SQLAlchemy: {name}")
        return op.apply(column, value)


__all__ = ["SQLAlchemyOperator", "SQLAlchemyOperatorRegistry"]
