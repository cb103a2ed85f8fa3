"""Tests for the response envelope, pagination and operational endpoints."""

import pytest
from fastapi.testclient import TestClient

from conftest import data
from storefront.db.sql import page_params
from storefront.exceptions import BadRequestError
from storefront.main import app
from storefront.schemas.common import ApiResponse, PageResponse


class TestPageResponse:
    @pytest.mark.parametrize("page,size,total,pages,first,last,has_next", [
        (0, 10, 0, 0, True, True, False),
        (0, 10, 25, 3, True, False, True),
        (1, 10, 25, 3, False, False, True),
        (2, 10, 25, 3, False, True, False),
        (0, 5, 5, 1, True, True, False),
    ])
    def test_navigation(self, page, size, total, pages, first, last, has_next):
        result = PageResponse.of([], page, size, total)
        assert result.total_pages == pages
        assert result.first is first
        assert result.last is last
        assert result.has_next is has_next
        assert result.has_previous is (page > 0)

    def test_zero_size(self):
        assert PageResponse.of([], 0, 0, 7).total_pages == 0

    def test_camel_case_json(self):
        body = PageResponse.of([1, 2], 0, 2, 4).model_dump(mode="json", by_alias=True)
        assert set(body) == {
            "content", "pageNumber", "pageSize", "totalElements", "totalPages",
            "first", "last", "hasNext", "hasPrevious",
        }


class TestPageParams:
    def test_offset(self):
        assert page_params(2, 20) == {"limit": 20, "offset": 40}

    @pytest.mark.parametrize("page,size", [(-1, 10), (0, 0), (0, 101)])
    def test_out_of_range(self, page, size):
        with pytest.raises(BadRequestError):
            page_params(page, size)

    def test_rejected_over_http(self, client):
        response = client.get("/api/products", params={"size": 500})
        assert response.status_code == 400
        assert response.json()["message"] == "Page size cannot exceed 100"


class TestEnvelope:
    def test_errors_omitted_when_empty(self):
        body = ApiResponse.success({"a": 1}).model_dump(mode="json", by_alias=True)
        assert "errors" not in body
        assert body["statusCode"] == 200
        assert body["status"] is True

    def test_error_shape(self, client):
        response = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        body = response.json()
        assert body["status"] is False
        assert body["statusCode"] == 404
        assert body["path"] == "/api/users/00000000-0000-0000-0000-000000000000"
        assert body["data"] is None
        assert "timestamp" in body

    def test_validation_errors_are_listed(self, client):
        response = client.post("/api/users", json={"emailAddress": "not-an-email", "firstName": "A"})
        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"emailAddress", "lastName", "password"} <= fields

    def test_malformed_uuid(self, client):
        response = client.get("/api/products/not-a-uuid")
        assert response.status_code == 400

    def test_unknown_route(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["status"] is False

    def test_unexpected_error(self, db_engine, monkeypatch):
        from storefront.services.product_service import ProductService

        def explode(db):
            raise RuntimeError("boom")

        monkeypatch.setattr(ProductService, "count_products", staticmethod(explode))
        response = TestClient(app, raise_server_exceptions=False).get("/api/products/count")
        assert response.status_code == 500
        assert response.json()["message"] == "An unexpected error occurred"


class TestOperational:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["service"] == "storefront-api"

    def test_ready(self, client):
        body = client.get("/ready").json()
        assert body["status"] == "ready"
        assert body["database"] == "connected"

    def test_root(self, client):
        assert client.get("/").json()["graphql"] == "/graphql"

    def test_health_reports_cache_usage(self, client, product):
        client.get(f"/api/products/{product['id']}")
        stats = client.get("/health").json()["caches"]["products"]
        assert stats["hits"] >= 1
