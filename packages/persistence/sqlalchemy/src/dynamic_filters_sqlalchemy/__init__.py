"""SQLAlchemy backend for dynamic filters."""

from __future__ import annotations

from .context import SQLAlchemyQueryContext, coerce_value
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .records import AGGREGATIONS, RecordRepository
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "AGGREGATIONS",
    "DEFAULT_SQLA_REGISTRY",
    "RecordRepository",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SQLAlchemyQueryContext",
    "build_default_sqla_registry",
    "coerce_value",
]
