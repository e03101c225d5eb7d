from __future__ import annotations

import pytest

from dynamic_filters import (
    CustomFilterRegistry,
    CustomFilters,
    DynamicFilter,
    FilterConfig,
    FilterOperator,
    FilterPolicy,
    InMemoryQueryContext,
)

# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class Provider:
    allowed_filters = ("name", "country")


class Review:
    allowed_filters = ("rating",)


class Product:
    allowed_filters = ("category", "price", "name", "quantity", "password")
    allowed_relations = ("provider", "reviews")
    allowed_ordering = ("price", "name")


class Warehouse:
    """Declares no allow-list at all."""


class ProductFilters(CustomFilters):
    calls: list[tuple[str, object]] = []

    def stock(self, value: object) -> None:
        ProductFilters.calls.append(("stock", value))
        if value == "low":
            self.query.where("quantity", FilterOperator.LT, 5)

    def _internal(self, value: object) -> None:  # pragma: no cover
        raise AssertionError("private handlers must never be dispatched")

    @staticmethod
    def helper(value: object) -> None:  # pragma: no cover
        raise AssertionError("static helpers must never be dispatched")


RELATIONS = {"provider": Provider, "reviews": Review}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def product() -> type[Product]:
    return Product


@pytest.fixture
def warehouse() -> type[Warehouse]:
    return Warehouse


@pytest.fixture
def context() -> InMemoryQueryContext:
    return InMemoryQueryContext(Product, relations=RELATIONS)


@pytest.fixture
def make_context():
    return lambda: InMemoryQueryContext(Product, relations=RELATIONS)


@pytest.fixture
def custom_filters() -> CustomFilterRegistry:
    ProductFilters.calls = []
    registry = CustomFilterRegistry()
    registry.register(Product, ProductFilters)
    return registry


@pytest.fixture
def dynamic_filter(custom_filters: CustomFilterRegistry) -> DynamicFilter:
    return DynamicFilter(custom_filters=custom_filters)


@pytest.fixture
def lenient_filter(custom_filters: CustomFilterRegistry) -> DynamicFilter:
    return DynamicFilter(
        config=FilterConfig(policy=FilterPolicy.IGNORE),
        custom_filters=custom_filters,
    )


@pytest.fixture
def product_filters() -> type[ProductFilters]:
    return ProductFilters
