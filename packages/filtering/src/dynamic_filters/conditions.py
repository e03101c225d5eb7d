"""
Condition compiler.

Turns one validated ``(field, operator, value)`` triple into a single
predicate on a :class:`~dynamic_filters.context.QueryContext`, shaping the
value the way the operator family expects it:

==================  ===================================================
family              value handling
==================  ===================================================
null / nNull        value ignored
in / nIn            split on the list delimiter into a list
between / nBetween  split on the list delimiter into exactly two bounds
like / nLike        wrapped as ``%value%``
everything else     passed through unchanged; a list or mapping is malformed
==================  ===================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_CONFIG, FilterConfig
from .exceptions import MalformedValueError
from .operators import Arity, FilterOperator, OperatorSpec, lookup_operator

if TYPE_CHECKING:
    from .context import QueryContext

logger = logging.getLogger(__name__)

LIKE_WILDCARD = "%"


@dataclass(frozen=True)
class PreparedCondition:
    """A condition whose operator is known and whose value is already shaped."""

    field: str
    spec: OperatorSpec
    value: Any


class ConditionCompiler:
    """Emit one predicate per validated condition."""

    def __init__(self, config: FilterConfig = DEFAULT_CONFIG) -> None:
        self._config = config

    def compile(
        self, context: QueryContext, field: str, operator: str, value: Any
    ) -> bool:
        """
        Add the predicate for ``field operator value`` to *context*.

        Returns ``True`` when a predicate was added.  Unknown operators are a
        silent no-op.
        """
        prepared = self.prepare(field, operator, value)
        if prepared is None:
            return False
        self.apply(context, prepared)
        return True

    def prepare(self, field: str, operator: str, value: Any) -> PreparedCondition | None:
        """
        Resolve the operator and shape the value without touching a context.

        Returns ``None`` when nothing should be emitted: the operator is
        unknown, or the value is malformed and the policy ignores violations.
        """
        spec = lookup_operator(operator)
        if spec is None:
            logger.debug("Skipping unknown operator %r on field %r", operator, field)
            return None

        if spec.arity is Arity.UNARY:
            return PreparedCondition(field, spec, None)
        if spec.arity is Arity.LIST:
            return PreparedCondition(field, spec, self._split(value))
        if spec.arity is Arity.RANGE:
            bounds = self._split(value)
            if len(bounds) != 2:
                self._config.policy.violation(
                    MalformedValueError(
                        field,
                        operator,
                        value,
                        f"expected exactly 2 bounds, got {len(bounds)}",
                    )
                )
                return None
            return PreparedCondition(field, spec, tuple(bounds))
        if isinstance(value, list | tuple | dict):
            self._config.policy.violation(
                MalformedValueError(field, operator, value, "expected a single value")
            )
            return None
        if spec.token in (FilterOperator.LIKE, FilterOperator.NOT_LIKE):
            return PreparedCondition(
                field, spec, f"{LIKE_WILDCARD}{value}{LIKE_WILDCARD}"
            )
        return PreparedCondition(field, spec, value)

    def apply(self, context: QueryContext, condition: PreparedCondition) -> None:
        """Write an already prepared condition into *context*."""
        spec = condition.spec
        field = condition.field
        if spec.arity is Arity.UNARY:
            context.where_null(field, negate=spec.negated)
        elif spec.arity is Arity.LIST:
            context.where_in(field, condition.value, negate=spec.negated)
        elif spec.arity is Arity.RANGE:
            low, high = condition.value
            context.where_between(field, low, high, negate=spec.negated)
        elif spec.token in (FilterOperator.LIKE, FilterOperator.NOT_LIKE):
            context.where_like(field, condition.value, negate=spec.negated)
        else:
            context.where(field, spec.token, condition.value)

    def _split(self, value: Any) -> list[Any]:
        if isinstance(value, list | tuple):
            return list(value)
        if value is None:
            return []
        return [part.strip() for part in str(value).split(self._config.list_delimiter)]


__all__ = ["LIKE_WILDCARD", "ConditionCompiler", "PreparedCondition"]
