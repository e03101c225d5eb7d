"""Parsing of ``field:operator`` and ``relation.field:operator`` filter keys."""

from __future__ import annotations

from dataclasses import dataclass

OPERATOR_SEPARATOR = ":"
RELATION_SEPARATOR = "."


@dataclass(frozen=True)
class FilterKey:
    """A parsed filter key.

    ``field`` and ``operator`` are both ``None`` when the raw key carried no
    operator separator; such keys are ignored by the compilers.
    """

    field: str | None
    operator: str | None
    relation: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.field) and bool(self.operator)


def parse_filter_key(raw_key: str) -> FilterKey:
    """Split *raw_key* on the first ``:`` into ``(field, operator)``.

    Never raises: a key without a separator, or with an empty side, yields an
    incomplete :class:`FilterKey`.
    """
    field, sep, operator = str(raw_key).partition(OPERATOR_SEPARATOR)
    if not sep or not field or not operator:
        return FilterKey(field=None, operator=None)
    return FilterKey(field=field, operator=operator)


def parse_relation_key(raw_key: str) -> FilterKey | None:
    """Split *raw_key* on the first ``.`` and parse the remainder as a filter key.

    Returns ``None`` when the key is not a relation filter at all (no ``.``,
    or nothing on one side of it).
    """
    relation, sep, remainder = str(raw_key).partition(RELATION_SEPARATOR)
    if not sep or not relation or not remainder:
        return None
    key = parse_filter_key(remainder)
    return FilterKey(field=key.field, operator=key.operator, relation=relation)


__all__ = ["FilterKey", "parse_filter_key", "parse_relation_key"]
