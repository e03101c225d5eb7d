"""
Filtering exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``FilterError`` and provide ``to_dict()`` for
API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable


class FilterError(Exception):
    """Base exception for all filtering errors."""

    http_status: int = 400

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FilterNotAllowedError(FilterError):
    """
    A key outside the entity's allow-list.

    Subclasses name the offending key and offer suggestions from the names
    that *are* allowed.
    """

    error_code = "FILTER_NOT_ALLOWED"
    kind = "filter"

    def __init__(
        self,
        key: str,
        entity_name: str,
        allowed: Iterable[str] = (),
    ) -> None:
        self.key = key
        self.entity_name = entity_name
        self.allowed = sorted(allowed)
        self.suggestions = get_close_matches(key, self.allowed, n=3, cutoff=0.6)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        message = f"The {self.kind} '{self.key}' is not allowed on '{self.entity_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        return message

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": str(self),
            "key": self.key,
            "entity": self.entity_name,
            "suggestions": self.suggestions,
        }


class DisallowedFieldError(FilterNotAllowedError):
    """Raised when a filter field is not in ``allowed_filters``."""

    error_code = "FIELD_NOT_ALLOWED"
    kind = "filter"


class DisallowedRelationError(FilterNotAllowedError):
    """Raised when a relation filter targets a relation not in ``allowed_relations``."""

    error_code = "RELATION_NOT_ALLOWED"
    kind = "relation"


class DisallowedOrderFieldError(FilterNotAllowedError):
    """Raised when ``orderBy`` names a field not in ``allowed_ordering``."""

    error_code = "ORDER_FIELD_NOT_ALLOWED"
    kind = "orderBy field"


class UnknownCustomFilterError(FilterError):
    """Raised when a custom filter handler has no method for the requested key."""

    def __init__(self, method: str, handler_name: str) -> None:
        self.method = method
        self.handler_name = handler_name
        super().__init__(f"Custom filter '{method}' does not exist in {handler_name}.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CUSTOM_FILTER_NOT_FOUND",
            "message": str(self),
            "method": self.method,
            "handler": self.handler_name,
        }


class MalformedValueError(FilterError):
    """Raised when a filter value cannot take the shape its operator requires."""

    def __init__(self, field: str, operator: str, value: Any, reason: str) -> None:
        self.field = field
        self.operator = operator
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value {value!r} for '{field}:{operator}': {reason}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MALFORMED_VALUE",
            "message": str(self),
            "field": self.field,
            "operator": self.operator,
        }


class InvalidRequestError(FilterError):
    """The inbound parameter bag failed validation.

    Carries structured errors: ``{location: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        else:
            self.errors = errors
        super().__init__(str(self.errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "message": "The request parameters are invalid.",
            "errors": self.errors,
        }


class InvalidAggregationError(FilterError):
    """Raised when an aggregate fetch names an unsupported aggregation."""

    def __init__(self, aggregation: str, supported: Iterable[str]) -> None:
        self.aggregation = aggregation
        self.supported = sorted(supported)
        super().__init__(
            f"Unsupported aggregation '{aggregation}'. "
            f"Supported: {', '.join(self.supported)}"
        )


class RecordNotFoundError(FilterError):
    """Raised when a record addressed by id does not exist."""

    http_status = 404

    def __init__(self, entity_name: str, record_id: object) -> None:
        self.entity_name = entity_name
        self.record_id = record_id
        super().__init__(f"{entity_name} with id={record_id!r} not found")


__all__ = [
    "DisallowedFieldError",
    "DisallowedOrderFieldError",
    "DisallowedRelationError",
    "FilterError",
    "FilterNotAllowedError",
    "InvalidAggregationError",
    "InvalidRequestError",
    "MalformedValueError",
    "RecordNotFoundError",
    "UnknownCustomFilterError",
]
