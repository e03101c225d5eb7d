"""AllowList: per-entity filterable, relation and sortable names."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

# Never filterable, whatever an entity declares.
SENSITIVE_FIELDS: frozenset[str] = frozenset({"password", "api_token"})


class AllowList:
    """
    Per-entity allowed filter fields, relations and ordering fields.

    Fail-closed: an empty allow-list rejects everything.  Sensitive fields
    are removed from ``filters`` at construction time.
    """

    __slots__ = ("_filters", "_ordering", "_relations")

    def __init__(
        self,
        *,
        filters: Iterable[str] | None = None,
        relations: Iterable[str] | None = None,
        ordering: Iterable[str] | None = None,
    ) -> None:
        self._filters = frozenset(filters or ()) - SENSITIVE_FIELDS
        self._relations = frozenset(relations or ())
        self._ordering = frozenset(ordering or ())

    @property
    def filters(self) -> frozenset[str]:
        return self._filters

    @property
    def relations(self) -> frozenset[str]:
        return self._relations

    @property
    def ordering(self) -> frozenset[str]:
        return self._ordering

    def is_allowed_field(self, field: str) -> bool:
        return field not in SENSITIVE_FIELDS and field in self._filters

    def is_allowed_relation(self, relation: str) -> bool:
        return relation in self._relations

    def is_allowed_order(self, field: str) -> bool:
        return field in self._ordering

    @classmethod
    def for_entity(cls, entity_type: Any) -> AllowList:
        """
        Build the allow-list an entity declares.

        An entity either exposes a ready ``filter_allow_list`` or declares
        ``allowed_filters`` / ``allowed_relations`` / ``allowed_ordering``
        class attributes.  Anything missing is empty.
        """
        if entity_type is None:
            return cls()
        declared = getattr(entity_type, "filter_allow_list", None)
        if isinstance(declared, AllowList):
            return declared
        return cls(
            filters=getattr(entity_type, "allowed_filters", None),
            relations=getattr(entity_type, "allowed_relations", None),
            ordering=getattr(entity_type, "allowed_ordering", None),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllowList):
            return NotImplemented
        return (
            self._filters == other._filters
            and self._relations == other._relations
            and self._ordering == other._ordering
        )

    def __hash__(self) -> int:
        return hash((self._filters, self._relations, self._ordering))

    def __repr__(self) -> str:
        return (
            f"AllowList(filters={sorted(self._filters)}, "
            f"relations={sorted(self._relations)}, "
            f"ordering={sorted(self._ordering)})"
        )


def entity_name(entity_type: Any) -> str:
    """Human-readable name of an entity type for error messages."""
    if entity_type is None:
        return "<unknown>"
    return getattr(entity_type, "__name__", None) or str(entity_type)


__all__ = ["SENSITIVE_FIELDS", "AllowList", "entity_name"]
