"""DynamicFilter: compose the compilers over one query context."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .allowlist import AllowList, entity_name
from .conditions import ConditionCompiler
from .config import DEFAULT_CONFIG, FilterConfig
from .custom import CustomFilterDispatcher, CustomFilterRegistry
from .exceptions import DisallowedFieldError
from .keys import parse_filter_key
from .ordering import OrderingCompiler
from .relations import RelationCompiler
from .request import FilterRequest

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .context import QueryContext

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="QueryContext")


class DynamicFilter:
    """
    Apply a :class:`FilterRequest` to a query context.

    Steps always run in the same order: field filters, relation filters,
    custom filters, ordering.  Under ``FilterPolicy.REJECT`` the first
    violation aborts the pass before any later step runs.

    Usage::

        dynamic_filter = DynamicFilter(custom_filters=registry)
        dynamic_filter.apply(context, Product, {"filters": {"price:gte": "500"}})
    """

    def __init__(
        self,
        *,
        config: FilterConfig | None = None,
        custom_filters: CustomFilterRegistry | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._conditions = ConditionCompiler(self._config)
        self._relations = RelationCompiler(self._config, self._conditions)
        self._custom = CustomFilterDispatcher(custom_filters, self._config)
        self._ordering = OrderingCompiler(self._config)

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def custom_filters(self) -> CustomFilterRegistry:
        return self._custom.registry

    def apply(
        self,
        context: C,
        entity_type: Any,
        request: FilterRequest | Mapping[str, Any] | None,
    ) -> C:
        """Compile *request* into *context* and return the same context."""
        params = FilterRequest.from_params(request)
        allow_list = AllowList.for_entity(entity_type)
        logger.debug(
            "Applying filters to %s: %d field, %d relation, %d custom, orderBy=%r",
            entity_name(entity_type),
            len(params.filters),
            len(params.relation_filters),
            len(params.custom_filters),
            params.order_by,
        )
        self.apply_filters(context, entity_type, allow_list, params.filters)
        self.apply_relation_filters(
            context, entity_type, allow_list, params.relation_filters
        )
        self._custom.dispatch(context, entity_type, params.custom_filters)
        self._ordering.compile(context, entity_type, allow_list, params.order_by)
        return context

    def apply_filters(
        self,
        context: QueryContext,
        entity_type: Any,
        allow_list: AllowList,
        filters: Mapping[str, Any],
    ) -> None:
        for raw_key, value in filters.items():
            key = parse_filter_key(raw_key)
            if not key.is_complete:
                logger.debug("Skipping malformed filter key %r", raw_key)
                continue
            field = str(key.field)
            if not allow_list.is_allowed_field(field):
                self._config.policy.violation(
                    DisallowedFieldError(
                        field, entity_name(entity_type), allow_list.filters
                    )
                )
                continue
            self._conditions.compile(context, field, str(key.operator), value)

    def apply_relation_filters(
        self,
        context: QueryContext,
        entity_type: Any,
        allow_list: AllowList,
        relation_filters: Mapping[str, Any],
    ) -> None:
        for raw_key, value in relation_filters.items():
            self._relations.compile_key(context, entity_type, allow_list, raw_key, value)


__all__ = ["DynamicFilter"]
