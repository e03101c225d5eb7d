"""Ordering compiler: a single ``orderBy`` key with an optional ``-`` for descending."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .allowlist import AllowList, entity_name
from .config import DEFAULT_CONFIG, FilterConfig
from .exceptions import DisallowedOrderFieldError

if TYPE_CHECKING:
    from .context import Direction, QueryContext

logger = logging.getLogger(__name__)

DESCENDING_PREFIX = "-"


def parse_order(order_spec: str) -> tuple[str, Direction]:
    """``"-price"`` -> ``("price", "desc")``; ``"price"`` -> ``("price", "asc")``."""
    direction: Direction = "desc" if order_spec.startswith(DESCENDING_PREFIX) else "asc"
    return order_spec.lstrip(DESCENDING_PREFIX), direction


class OrderingCompiler:
    """Validate one sort key against ``allowed_ordering`` and emit it."""

    def __init__(self, config: FilterConfig = DEFAULT_CONFIG) -> None:
        self._config = config

    def compile(
        self,
        context: QueryContext,
        entity_type: Any,
        allow_list: AllowList,
        order_spec: str | None,
    ) -> bool:
        # Absent orderBy imposes no default order.
        if not order_spec:
            return False
        field, direction = parse_order(order_spec)
        if not allow_list.is_allowed_order(field):
            self._config.policy.violation(
                DisallowedOrderFieldError(
                    field, entity_name(entity_type), allow_list.ordering
                )
            )
            return False
        context.order_by(field, direction)
        return True


__all__ = ["OrderingCompiler", "parse_order"]
