"""
Record operations: filtered reads, aggregates, pagination and writes.

``RecordRepository`` runs a :class:`~dynamic_filters.DynamicFilter` over an
``AsyncSession``.  Writes are flushed, never committed; the caller owns the
transaction::

    async with session.begin():
        repo = RecordRepository(Product, session)
        page = await repo.paginate({"filters": {"price:gte": "500"}, "perPage": 20})
        await repo.save_many([{"name": "A"}, {"name": "B"}], {"category_id": 3})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete, func, inspect, select, update

from dynamic_filters.allowlist import entity_name
from dynamic_filters.attributes import AttributeTable
from dynamic_filters.exceptions import InvalidAggregationError, RecordNotFoundError
from dynamic_filters.orchestrator import DynamicFilter
from dynamic_filters.request import FilterRequest
from dynamic_filters.response import Page

from .context import SQLAlchemyQueryContext

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger(__name__)

M = TypeVar("M")

AGGREGATIONS: dict[str, Any] = {
    "count": func.count,
    "sum": func.sum,
    "avg": func.avg,
    "min": func.min,
    "max": func.max,
}

RequestLike = FilterRequest | dict[str, Any] | None


class RecordRepository(Generic[M]):
    """
    Dynamic-filter record operations for one mapped model.

    Mass assignment only touches mapped columns; every written value passes
    through the model's :class:`AttributeTable` first.
    """

    def __init__(
        self,
        model: type[M],
        session: AsyncSession,
        *,
        dynamic_filter: DynamicFilter | None = None,
        attributes: AttributeTable | None = None,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self.session = session
        self.dynamic_filter = dynamic_filter or DynamicFilter()
        self.attributes = attributes or AttributeTable.for_entity(model)
        self._registry = registry
        self._columns = frozenset(inspect(model).column_attrs.keys())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def compile(self, request: RequestLike = None) -> SQLAlchemyQueryContext:
        context = SQLAlchemyQueryContext(self.model, registry=self._registry)
        return self.dynamic_filter.apply(context, self.model, request)

    def filter(self, request: RequestLike = None) -> Select[Any]:
        """The filtered, ordered ``SELECT`` for *request*, not executed."""
        return self.compile(request).statement

    async def fetch_records(self, request: RequestLike = None) -> list[M]:
        result = await self.session.execute(self.filter(request))
        return list(result.scalars().all())

    async def fetch_single_record(self, request: RequestLike = None) -> M | None:
        result = await self.session.execute(self.filter(request).limit(1))
        return result.scalars().first()

    async def fetch_aggregated_records(
        self,
        request: RequestLike,
        aggregation: str,
        column: str,
    ) -> float:
        """Apply ``count|sum|avg|min|max`` to *column* over the matching rows."""
        aggregate = AGGREGATIONS.get(aggregation)
        if aggregate is None:
            raise InvalidAggregationError(aggregation, sorted(AGGREGATIONS))
        context = self.compile(request)
        stmt = (
            select(aggregate(context.column(column)))
            .select_from(self.model)
            .where(*context.clauses)
        )
        value = (await self.session.execute(stmt)).scalar()
        return float(value or 0)

    async def paginate(self, request: RequestLike = None) -> Page[M]:
        params = FilterRequest.from_params(request)
        context = self.compile(params)
        count_stmt = (
            select(func.count()).select_from(self.model).where(*context.clauses)
        )
        total = (await self.session.execute(count_stmt)).scalar() or 0
        offset = (params.page - 1) * params.per_page
        result = await self.session.execute(
            context.statement.limit(params.per_page).offset(offset)
        )
        return Page(
            items=list(result.scalars().all()),
            page=params.page,
            per_page=params.per_page,
            total=int(total),
        )

    # ------------------------------------------------------------------
    # Bulk writes over a filter
    # ------------------------------------------------------------------

    async def multi_update(self, request: RequestLike) -> int:
        """Apply ``updatedData`` to every matching row; returns the row count."""
        params = FilterRequest.from_params(request)
        values = self.attributes.encode(self._assignable(params.updated_data))
        if not values:
            return 0
        context = self.compile(params)
        stmt = (
            update(self.model)
            .where(*context.clauses)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        self.session.expire_all()
        logger.debug("Updated %d %s row(s)", result.rowcount, entity_name(self.model))
        return int(result.rowcount)

    async def multi_delete(self, request: RequestLike) -> int:
        context = self.compile(request)
        stmt = (
            delete(self.model)
            .where(*context.clauses)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        self.session.expire_all()
        logger.debug("Deleted %d %s row(s)", result.rowcount, entity_name(self.model))
        return int(result.rowcount)

    # ------------------------------------------------------------------
    # Single-record writes
    # ------------------------------------------------------------------

    async def store_record(self, params: Mapping[str, Any]) -> M:
        record = self.model(**self.attributes.encode(self._assignable(params)))
        self.session.add(record)
        await self.session.flush()
        return record

    async def update_record(self, params: Mapping[str, Any]) -> M:
        record_id = params.get("id")
        record = (
            await self.session.get(self.model, record_id)
            if record_id is not None
            else None
        )
        if record is None:
            raise RecordNotFoundError(entity_name(self.model), record_id)
        for name, value in self.attributes.encode(self._assignable(params)).items():
            setattr(record, name, value)
        await self.session.flush()
        return record

    async def save_one(self, params: Mapping[str, Any]) -> M:
        """Update when ``id`` is present, insert otherwise."""
        if params.get("id") is not None:
            return await self.update_record(params)
        return await self.store_record(params)

    async def save_many(
        self,
        rows: Sequence[Mapping[str, Any]],
        extra: Mapping[str, Any] | None = None,
    ) -> list[M]:
        """``save_one`` for each row, with *extra* merged over every row."""
        return [await self.save_one({**row, **(extra or {})}) for row in rows]

    async def save_many_to_many(self, params: Mapping[str, Any]) -> list[M]:
        """
        Replace the pivot rows of one owner.

        ``{"order_id": [1, 2, 3], "user_id": 1}`` deletes every row with
        ``user_id == 1`` and inserts one row per unique ``order_id``.
        Fewer than two keys is a no-op.
        """
        keys = list(params)
        if len(keys) < 2:
            return []
        key_one, key_two = keys[:2]
        values_one = params[key_one]
        value_two = params[key_two]
        if not isinstance(values_one, list | tuple):
            values_one = [values_one]

        owner = getattr(self.model, key_two)
        # "fetch" also evicts the replaced rows from the session.
        await self.session.execute(
            delete(self.model)
            .where(owner == value_two)
            .execution_options(synchronize_session="fetch")
        )
        rows = [{key_one: v, key_two: value_two} for v in dict.fromkeys(values_one)]
        return await self.save_many(rows)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self, record: M) -> dict[str, Any]:
        """Column values of *record*, decoded through the attribute table."""
        raw = {name: getattr(record, name) for name in sorted(self._columns)}
        return self.attributes.decode(raw)

    def _assignable(self, params: Mapping[str, Any]) -> dict[str, Any]:
        values = {k: v for k, v in params.items() if k in self._columns}
        dropped = set(params) - set(values)
        if dropped:
            logger.debug(
                "Ignoring non-column keys for %s: %s",
                entity_name(self.model),
                sorted(dropped),
            )
        return values


__all__ = ["AGGREGATIONS", "RecordRepository"]
