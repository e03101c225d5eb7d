"""FilterRequest: the inbound parameter bag, validated with pydantic."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import InvalidRequestError

if TYPE_CHECKING:
    from collections.abc import Iterable

# filters[price:gte]=500, relationFilters[provider.name:like]=mo, customFilters[tags][]=a
_BRACKET_KEY = re.compile(r"^(?P<group>[A-Za-z_]+)\[(?P<key>[^\]]+)\](?P<many>\[\])?$")

_GROUPS = ("filters", "relationFilters", "customFilters", "updatedData")


class FilterRequest(BaseModel):
    """
    Untrusted request parameters for one filter pass.

    Field names follow the wire format (``relationFilters``, ``orderBy``,
    ``perPage``...) through aliases; snake_case names are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    filters: dict[str, Any] = Field(default_factory=dict)
    relation_filters: dict[str, Any] = Field(
        default_factory=dict, alias="relationFilters"
    )
    custom_filters: dict[str, Any] = Field(default_factory=dict, alias="customFilters")
    order_by: str | None = Field(default=None, alias="orderBy")
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1, alias="perPage")
    updated_data: dict[str, Any] = Field(default_factory=dict, alias="updatedData")

    @classmethod
    def from_params(cls, params: FilterRequest | Mapping[str, Any] | None) -> FilterRequest:
        """
        Validate an already decoded parameter mapping.

        Raises:
            InvalidRequestError: with ``{location: [messages]}`` errors.
        """
        if isinstance(params, FilterRequest):
            return params
        if params is None:
            return cls()
        try:
            return cls.model_validate(dict(params))
        except PydanticValidationError as exc:
            errors: dict[str, list[str]] = {}
            for error in exc.errors():
                loc = ".".join(str(p) for p in error.get("loc", ("__root__",)))
                msg = error.get("msg", "validation error")
                errors.setdefault(loc, []).append(msg)
            raise InvalidRequestError(errors) from exc

    @classmethod
    def from_query_params(
        cls, params: Mapping[str, Any] | Iterable[tuple[str, Any]]
    ) -> FilterRequest:
        """
        Decode flat bracket-notation query parameters.

        ``{"filters[price:gte]": "500", "orderBy": "-price"}`` becomes
        ``filters={"price:gte": "500"}, order_by="-price"``.  A trailing
        ``[]`` collects repeated values into a list.
        """
        pairs = params.items() if isinstance(params, Mapping) else params
        decoded: dict[str, Any] = {}
        for raw_key, value in pairs:
            match = _BRACKET_KEY.match(raw_key)
            if match is None or match.group("group") not in _GROUPS:
                decoded[raw_key] = value
                continue
            group = decoded.setdefault(match.group("group"), {})
            if not isinstance(group, dict):
                raise InvalidRequestError(
                    {match.group("group"): ["Input should be a valid dictionary"]}
                )
            key = match.group("key")
            if match.group("many"):
                values = value if isinstance(value, list) else [value]
                group.setdefault(key, []).extend(values)
            else:
                group[key] = value
        return cls.from_params(decoded)

    @classmethod
    def from_query_string(cls, query_string: str) -> FilterRequest:
        """Parse a raw ``a=1&b=2`` query string (leading ``?`` allowed)."""
        return cls.from_query_params(
            parse_qsl(query_string.lstrip("?"), keep_blank_values=True)
        )

    def to_query_string(self, **overrides: Any) -> str:
        """
        Encode back to bracket notation, e.g. for pagination links.

        Keyword overrides replace top-level parameters (``page=3``).
        """
        params: list[tuple[str, Any]] = []
        for group, values in (
            ("filters", self.filters),
            ("relationFilters", self.relation_filters),
            ("customFilters", self.custom_filters),
        ):
            for key, value in values.items():
                if isinstance(value, list):
                    params.extend((f"{group}[{key}][]", v) for v in value)
                else:
                    params.append((f"{group}[{key}]", value))
        scalars: dict[str, Any] = {
            "orderBy": self.order_by,
            "page": self.page,
            "perPage": self.per_page,
        }
        scalars.update(overrides)
        params.extend((k, v) for k, v in scalars.items() if v is not None)
        return urlencode(params)


__all__ = ["FilterRequest"]
