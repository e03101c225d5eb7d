"""Allow-listed dynamic query filtering: fields, relations, custom filters, ordering."""

from __future__ import annotations

from .allowlist import SENSITIVE_FIELDS, AllowList
from .attributes import (
    AttributeCodec,
    AttributeKind,
    AttributeTable,
    MediaStorage,
    StoredFile,
)
from .conditions import ConditionCompiler
from .config import DEFAULT_CONFIG, FilterConfig, FilterPolicy
from .context import Direction, QueryContext
from .custom import CustomFilterDispatcher, CustomFilterRegistry, CustomFilters
from .exceptions import (
    DisallowedFieldError,
    DisallowedOrderFieldError,
    DisallowedRelationError,
    FilterError,
    FilterNotAllowedError,
    InvalidAggregationError,
    InvalidRequestError,
    MalformedValueError,
    RecordNotFoundError,
    UnknownCustomFilterError,
)
from .hashing import PasswordHasher
from .keys import FilterKey, parse_filter_key, parse_relation_key
from .memory import InMemoryQueryContext
from .operators import Arity, FilterOperator, OperatorSpec, lookup_operator
from .orchestrator import DynamicFilter
from .ordering import OrderingCompiler, parse_order
from .relations import RelationCompiler
from .request import FilterRequest
from .response import ApiResponse, Page, PaginationMeta

__all__ = [
    "DEFAULT_CONFIG",
    "SENSITIVE_FIELDS",
    "AllowList",
    "ApiResponse",
    "Arity",
    "AttributeCodec",
    "AttributeKind",
    "AttributeTable",
    "ConditionCompiler",
    "CustomFilterDispatcher",
    "CustomFilterRegistry",
    "CustomFilters",
    "Direction",
    "DisallowedFieldError",
    "DisallowedOrderFieldError",
    "DisallowedRelationError",
    "DynamicFilter",
    "FilterConfig",
    "FilterError",
    "FilterKey",
    "FilterNotAllowedError",
    "FilterOperator",
    "FilterPolicy",
    "FilterRequest",
    "InMemoryQueryContext",
    "InvalidAggregationError",
    "InvalidRequestError",
    "MalformedValueError",
    "MediaStorage",
    "OperatorSpec",
    "OrderingCompiler",
    "Page",
    "PaginationMeta",
    "PasswordHasher",
    "QueryContext",
    "RecordNotFoundError",
    "RelationCompiler",
    "StoredFile",
    "UnknownCustomFilterError",
    "lookup_operator",
    "parse_filter_key",
    "parse_order",
    "parse_relation_key",
]
