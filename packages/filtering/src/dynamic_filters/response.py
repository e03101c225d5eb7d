"""ApiResponse: uniform ``{status, message, data, pagination?}`` envelope."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from .exceptions import FilterError

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an executed, paginated result."""

    items: list[T] = field(default_factory=list)
    page: int = 1
    per_page: int = 10
    total: int = 0

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1


class PaginationMeta(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int

    @classmethod
    def from_page(cls, page: Page[Any]) -> PaginationMeta:
        return cls(
            current_page=page.page,
            per_page=page.per_page,
            total=page.total,
            last_page=page.last_page,
        )


class ApiResponse(BaseModel):
    """
    Response body shared by every endpoint.

    ``pagination`` is only present when the data came from a :class:`Page`.
    ``http_status`` travels with the envelope but is not part of the body.
    """

    status: Literal["success", "error"] = "success"
    message: str = "Success"
    data: Any = None
    pagination: PaginationMeta | None = None
    http_status: int = Field(default=200, exclude=True)

    @classmethod
    def success(
        cls,
        result: Any,
        *,
        message: str = "Success",
        http_status: int = 200,
        serializer: Callable[[Any], Any] | None = None,
    ) -> ApiResponse:
        """
        Wrap *result* in a success envelope.

        *serializer* maps each record (each item of a :class:`Page` or list)
        to plain data, e.g. ``RecordRepository.to_dict`` for ORM rows.
        """
        if serializer is not None:
            result = _serialize(result, serializer)
        if isinstance(result, Page):
            return cls(
                message=message,
                data=list(result.items),
                pagination=PaginationMeta.from_page(result),
                http_status=http_status,
            )
        return cls(message=message, data=result, http_status=http_status)

    @classmethod
    def failure(cls, error: FilterError) -> ApiResponse:
        return cls(
            status="error",
            message=str(error),
            data=error.to_dict(),
            http_status=error.http_status,
        )

    def to_dict(self) -> dict[str, Any]:
        body = self.model_dump(mode="json")
        if self.pagination is None:
            body.pop("pagination", None)
        return body


def _serialize(result: Any, serializer: Callable[[Any], Any]) -> Any:
    if result is None:
        return None
    if isinstance(result, Page):
        return replace(result, items=[serializer(item) for item in result.items])
    if isinstance(result, list | tuple):
        return [serializer(item) for item in result]
    return serializer(result)


__all__ = ["ApiResponse", "Page", "PaginationMeta"]
