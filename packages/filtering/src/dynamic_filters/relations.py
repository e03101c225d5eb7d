"""Relation predicate compiler: ``relation.field:operator`` filters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .allowlist import AllowList, entity_name
from .conditions import ConditionCompiler
from .config import DEFAULT_CONFIG, FilterConfig
from .exceptions import DisallowedFieldError, DisallowedRelationError
from .keys import parse_relation_key

if TYPE_CHECKING:
    from .context import QueryContext

logger = logging.getLogger(__name__)


class RelationCompiler:
    """
    Compile relation filters into existential predicates.

    The relation must be in the parent's ``allowed_relations``; the field
    must be in the *related* entity's own ``allowed_filters``.  The inner
    condition is wrapped in ``where_has`` so a parent row matches when at
    least one related row does, without duplicating parent rows.
    """

    def __init__(
        self,
        config: FilterConfig = DEFAULT_CONFIG,
        conditions: ConditionCompiler | None = None,
    ) -> None:
        self._config = config
        self._conditions = conditions or ConditionCompiler(config)

    def compile_key(
        self,
        context: QueryContext,
        entity_type: Any,
        allow_list: AllowList,
        raw_key: str,
        value: Any,
    ) -> bool:
        """Parse *raw_key* and compile it. Non-relation keys are skipped."""
        key = parse_relation_key(raw_key)
        if key is None or key.relation is None:
            logger.debug("Skipping malformed relation filter key %r", raw_key)
            return False
        if not allow_list.is_allowed_relation(key.relation):
            self._config.policy.violation(
                DisallowedRelationError(
                    key.relation, entity_name(entity_type), allow_list.relations
                )
            )
            return False
        if not key.is_complete:
            logger.debug("Skipping malformed relation filter key %r", raw_key)
            return False
        return self.compile(
            context, key.relation, str(key.field), str(key.operator), value
        )

    def compile(
        self,
        context: QueryContext,
        relation: str,
        field: str,
        operator: str,
        value: Any,
    ) -> bool:
        """
        Add ``EXISTS(relation WHERE field operator value)`` to *context*.

        The relation itself must already have been validated.
        """
        target = context.related_entity(relation)
        target_allow_list = AllowList.for_entity(target)
        if not target_allow_list.is_allowed_field(field):
            self._config.policy.violation(
                DisallowedFieldError(
                    f"{relation}.{field}",
                    entity_name(target) if target is not None else relation,
                    (f"{relation}.{f}" for f in target_allow_list.filters),
                )
            )
            return False

        prepared = self._conditions.prepare(field, operator, value)
        if prepared is None:
            return False
        context.where_has(
            relation, lambda inner: self._conditions.apply(inner, prepared)
        )
        return True


__all__ = ["RelationCompiler"]
