"""Tests for logging and error handling."""

import pytest
from httpx import AsyncClient

from barstock.core.errors import (
    AlreadyInitializedError,
    ConflictError,
    ErrorDetail,
    InsufficientStockError,
    NotFoundError,
    PublishFailedError,
    ValidationError,
)
from barstock.core.logging import get_request_id, set_request_id
from barstock.core.sentry import filter_sensitive_data, init_sentry


class TestErrorClasses:
    """Test custom exception classes."""

    def test_validation_error_creates_correct_response(self):
        exc = ValidationError("Invalid email", details={"field": "email"})

        assert exc.code == "VALIDATION_ERROR"
        assert exc.status_code == 400
        assert exc.details == {"field": "email"}

        response = exc.to_response()
        assert isinstance(response, ErrorDetail)
        assert response.code == "VALIDATION_ERROR"

    def test_not_found_error_includes_resource_context(self):
        exc = NotFoundError(resource="Product", resource_id="123")

        assert exc.code == "NOT_FOUND"
        assert exc.status_code == 404
        assert exc.details == {"resource": "Product", "resource_id": "123"}

    def test_conflict_subclasses_keep_409(self):
        """Ledger conflicts all map to HTTP 409."""
        assert ConflictError("dup").code == "CONFLICT"
        assert AlreadyInitializedError("2026-03-10").status_code == 409

    def test_publish_failure_names_product(self):
        exc = PublishFailedError("2026-03-10", "abc", "Zed", "no inventory row")

        assert exc.code == "PUBLISH_FAILED"
        assert "Zed" in exc.message
        assert exc.details["product_name"] == "Zed"

    def test_insufficient_stock_carries_counts(self):
        exc = InsufficientStockError("Castle", requested=3, available=2)

        assert exc.status_code == 400
        assert exc.details == {"product": "Castle", "requested": 3, "available": 2}

    def test_empty_details_are_omitted(self):
        """An error without details serializes details as null."""
        assert ConflictError("dup").to_response().details is None


class TestRequestIDContext:
    def test_set_and_get_request_id(self):
        set_request_id("test-request-123")

        assert get_request_id() == "test-request-123"


class TestErrorHandling:
    """Test global error handlers and request tagging."""

    @pytest.mark.asyncio
    async def test_request_id_generated_and_echoed(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.get("/health")

        assert len(response.headers["x-request-id"]) == 36

    @pytest.mark.asyncio
    async def test_client_request_id_is_reused(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.get("/health", headers={"X-Request-ID": "till-7-abc"})

        assert response.headers["x-request-id"] == "till-7-abc"

    @pytest.mark.asyncio
    async def test_oversized_request_id_is_replaced(self, unauthenticated_client: AsyncClient):
        """Client request IDs longer than the limit are not trusted."""
        response = await unauthenticated_client.get("/health", headers={"X-Request-ID": "x" * 500})

        assert response.headers["x-request-id"] != "x" * 500

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_shape(self, unauthenticated_client: AsyncClient):
        """Framework 404s use the same error/code/details shape."""
        response = await unauthenticated_client.get("/no-such-page")

        assert response.status_code == 404
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_validation_failure_lists_fields(self, client: AsyncClient):
        """Pydantic failures come back as 400 naming the bad fields."""
        response = await client.post("/sales", json={"quantity": "many"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert set(body["details"]["fields"]) == {"product_id", "quantity"}


class TestSentry:
    def test_disabled_without_dsn(self, monkeypatch):
        monkeypatch.delenv("SENTRY_DSN", raising=False)

        assert init_sentry() is False

    def test_disabled_with_malformed_dsn(self, monkeypatch):
        """A bad DSN disables Sentry rather than crashing startup."""
        monkeypatch.setenv("SENTRY_DSN", "not-a-dsn")

        assert init_sentry() is False

    def test_sensitive_extras_are_dropped(self):
        """Passwords and session data never reach Sentry events."""
        event = {"extra": {"sql": "SELECT * FROM users", "product": "Castle"}}

        result = filter_sensitive_data(event, {})

        assert result["extra"] == {"product": "Castle"}

    def test_sensitive_breadcrumbs_are_dropped(self):
        event = {
            "breadcrumbs": {
                "values": [
                    {"category": "sqlalchemy", "message": "UPDATE inventory"},
                    {"category": "http", "message": "POST /sales"},
                ]
            }
        }

        result = filter_sensitive_data(event, {})

        assert [b["category"] for b in result["breadcrumbs"]["values"]] == ["http"]
