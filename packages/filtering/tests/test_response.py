"""Tests for the API response envelope."""

from __future__ import annotations

from dynamic_filters import (
    ApiResponse,
    DisallowedFieldError,
    Page,
    RecordNotFoundError,
)


def test_success_without_pagination() -> None:
    body = ApiResponse.success([{"id": 1}]).to_dict()
    assert body == {"status": "success", "message": "Success", "data": [{"id": 1}]}


def test_success_with_page() -> None:
    page = Page(items=[{"id": 3}, {"id": 4}], page=2, per_page=2, total=5)
    body = ApiResponse.success(page, message="Products").to_dict()
    assert body["message"] == "Products"
    assert body["data"] == [{"id": 3}, {"id": 4}]
    assert body["pagination"] == {
        "current_page": 2,
        "per_page": 2,
        "total": 5,
        "last_page": 3,
    }


def test_last_page_is_at_least_one() -> None:
    assert Page(items=[], page=1, per_page=10, total=0).last_page == 1
    assert Page(items=[], page=1, per_page=10, total=10).last_page == 1
    assert Page(items=[], page=1, per_page=10, total=11).last_page == 2


def test_failure_carries_status_outside_body() -> None:
    response = ApiResponse.failure(DisallowedFieldError("secret", "Product"))
    body = response.to_dict()
    assert response.http_status == 400
    assert "http_status" not in body
    assert body["status"] == "error"
    assert body["data"]["key"] == "secret"


def test_not_found_maps_to_404() -> None:
    response = ApiResponse.failure(RecordNotFoundError("Product", 7))
    assert response.http_status == 404
    assert response.data["error"] == "RecordNotFoundError"


class Row:
    def __init__(self, id: int) -> None:
        self.id = id


def test_serializer_maps_page_items() -> None:
    page = Page(items=[Row(1), Row(2)], page=1, per_page=2, total=3)
    body = ApiResponse.success(page, serializer=lambda r: {"id": r.id}).to_dict()
    assert body["data"] == [{"id": 1}, {"id": 2}]
    assert body["pagination"]["last_page"] == 2


def test_serializer_maps_lists_and_single_records() -> None:
    def as_dict(row: Row) -> dict[str, int]:
        return {"id": row.id}

    assert ApiResponse.success([Row(5)], serializer=as_dict).to_dict()["data"] == [
        {"id": 5}
    ]
    assert ApiResponse.success(Row(6), serializer=as_dict).data == {"id": 6}
    assert ApiResponse.success(None, serializer=as_dict).data is None
