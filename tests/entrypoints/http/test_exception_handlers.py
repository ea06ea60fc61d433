"""Tests for FastAPI exception handlers."""

import logging

import pytest
from fastapi import FastAPI, Query
from fastapi.testclient import TestClient

from rental_fleet.domain.errors import DomainError, NotFoundError, StoreError, ValidationError
from rental_fleet.entrypoints.http.exception_handlers import register_exception_handlers


@pytest.fixture
def app() -> FastAPI:
    """Create a minimal FastAPI app with exception handlers registered."""
    test_app = FastAPI()
    register_exception_handlers(test_app)

    @test_app.get("/validation-error")
    def raise_validation_error() -> None:
        raise ValidationError("Validation failed")

    @test_app.get("/validation-error-with-fields")
    def raise_validation_error_with_fields() -> None:
        raise ValidationError(
            errors=[
                {"field": "name", "message": "Must not be empty", "code": "REQUIRED"},
                {"field": "category", "message": "Must not be empty", "code": "REQUIRED"},
            ]
        )

    @test_app.get("/not-found-error")
    def raise_not_found_error() -> None:
        raise NotFoundError("Car", "tesla-model-3")

    @test_app.get("/store-error")
    def raise_store_error() -> None:
        raise StoreError("A car with this slug already exists", operation="create_car")

    @test_app.get("/domain-error")
    def raise_domain_error() -> None:
        raise DomainError("Something about the request is off")

    @test_app.get("/unexpected-error")
    def raise_unexpected_error() -> None:
        raise RuntimeError("boom")

    @test_app.get("/limited")
    def limited(limit: int = Query(ge=1)) -> dict[str, int]:
        return {"limit": limit}

    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


# ==============================================================================
# Domain errors
# ==============================================================================


def test_validation_error_returns_422(client: TestClient) -> None:
    response = client.get("/validation-error")

    assert response.status_code == 422
    assert response.json() == {"detail": "Validation failed", "code": "VALIDATION_ERROR"}


def test_validation_error_with_fields(client: TestClient) -> None:
    response = client.get("/validation-error-with-fields")

    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Validation failed"
    assert [error["field"] for error in data["errors"]] == ["name", "category"]


def test_not_found_error_returns_404(client: TestClient) -> None:
    response = client.get("/not-found-error")

    assert response.status_code == 404
    assert response.json() == {
        "detail": "Car with identifier 'tesla-model-3' not found",
        "code": "NOT_FOUND",
    }


def test_store_error_returns_502_and_logs(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        response = client.get("/store-error")

    assert response.status_code == 502
    assert response.json() == {
        "detail": "A car with this slug already exists",
        "code": "STORE_ERROR",
    }
    [record] = [r for r in caplog.records if r.message == "Domain error occurred"]
    assert record.error_code == "STORE_ERROR"
    assert record.context == {"operation": "create_car"}
    assert record.path == "/store-error"


def test_unmapped_domain_error_returns_400(client: TestClient) -> None:
    response = client.get("/domain-error")

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Something about the request is off",
        "code": "DOMAIN_ERROR",
    }


# ==============================================================================
# Request validation and unexpected errors
# ==============================================================================


def test_request_validation_error_lists_fields(client: TestClient) -> None:
    response = client.get("/limited", params={"limit": 0})

    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Invalid request parameters"
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "limit"
    assert data["errors"][0]["code"] == "greater_than_equal"


def test_unexpected_error_returns_generic_500(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        response = client.get("/unexpected-error")

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred", "code": "INTERNAL_ERROR"}
    [record] = [r for r in caplog.records if r.message == "Unexpected error occurred"]
    assert record.error_type == "RuntimeError"
    assert record.exc_info is not None
