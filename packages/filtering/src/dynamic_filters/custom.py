"""
Custom filters: per-entity predicates the operator table cannot express.

Handlers are registered explicitly against an entity type::

    custom_filters = CustomFilterRegistry()

    @custom_filters.handles(Product)
    class ProductFilters(CustomFilters):
        def stock(self, value):
            if value == "low":
                self.query.where("quantity", FilterOperator.LT, 5)

A request carrying ``customFilters={"stock": "low"}`` then calls
``ProductFilters(query).stock("low")``.  Handlers are trusted code: the value
is passed through as received.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .config import DEFAULT_CONFIG, FilterConfig
from .exceptions import UnknownCustomFilterError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .context import QueryContext

logger = logging.getLogger(__name__)

H = TypeVar("H", bound="type[CustomFilters]")


class CustomFilters:
    """Base class for custom filter handlers. One public method per filter key."""

    def __init__(self, query: QueryContext) -> None:
        self.query = query

    @classmethod
    def filter_method(cls, name: str) -> Callable[..., Any] | None:
        """
        Return the unbound handler method for *name*, or ``None``.

        Only public methods declared by a subclass qualify; attributes of
        ``CustomFilters`` itself and anything starting with ``_`` are never
        dispatchable.
        """
        if not name or name.startswith("_") or hasattr(CustomFilters, name):
            return None
        for klass in cls.__mro__:
            if klass is CustomFilters:
                break
            attr = klass.__dict__.get(name)
            if attr is not None:
                return attr if inspect.isfunction(attr) else None
        return None


class CustomFilterRegistry:
    """Explicit mapping from entity type to its custom filter handler class."""

    def __init__(self) -> None:
        self._handlers: dict[Any, type[CustomFilters]] = {}

    def register(self, entity_type: Any, handler_cls: type[CustomFilters]) -> None:
        if not (isinstance(handler_cls, type) and issubclass(handler_cls, CustomFilters)):
            raise TypeError(
                f"{handler_cls!r} must be a subclass of CustomFilters"
            )
        existing = self._handlers.get(entity_type)
        if existing is not None and existing is not handler_cls:
            raise ValueError(
                f"Duplicate custom filters for {getattr(entity_type, '__name__', entity_type)}: "
                f"{existing.__name__} already registered, "
                f"cannot register {handler_cls.__name__}"
            )
        self._handlers[entity_type] = handler_cls
        logger.debug(
            "Registered custom filters %s -> %s",
            getattr(entity_type, "__name__", entity_type),
            handler_cls.__name__,
        )

    def handles(self, entity_type: Any) -> Callable[[H], H]:
        """Class decorator form of :meth:`register`."""

        def decorator(handler_cls: H) -> H:
            self.register(entity_type, handler_cls)
            return handler_cls

        return decorator

    def resolve(self, entity_type: Any) -> type[CustomFilters] | None:
        """Handler class for *entity_type*, or ``None`` when it has none."""
        return self._handlers.get(entity_type)

    def __contains__(self, entity_type: Any) -> bool:
        return entity_type in self._handlers


class CustomFilterDispatcher:
    """Invoke custom filter methods for one compile pass."""

    def __init__(
        self,
        registry: CustomFilterRegistry | None = None,
        config: FilterConfig = DEFAULT_CONFIG,
    ) -> None:
        self._registry = registry or CustomFilterRegistry()
        self._config = config

    @property
    def registry(self) -> CustomFilterRegistry:
        return self._registry

    def dispatch(
        self,
        context: QueryContext,
        entity_type: Any,
        custom_filters: Mapping[str, Any],
    ) -> int:
        """
        Call one handler method per key in *custom_filters*.

        A missing handler class makes the whole step a no-op.  Returns the
        number of methods invoked.
        """
        if not custom_filters:
            return 0
        handler_cls = self._registry.resolve(entity_type)
        if handler_cls is None:
            logger.debug(
                "No custom filters registered for %s; skipping %d key(s)",
                getattr(entity_type, "__name__", entity_type),
                len(custom_filters),
            )
            return 0

        handler = handler_cls(context)
        invoked = 0
        for method_name, value in custom_filters.items():
            method = handler_cls.filter_method(method_name)
            if method is None:
                self._config.policy.violation(
                    UnknownCustomFilterError(method_name, handler_cls.__name__)
                )
                continue
            method(handler, value)
            invoked += 1
        return invoked


__all__ = ["CustomFilterDispatcher", "CustomFilterRegistry", "CustomFilters"]
