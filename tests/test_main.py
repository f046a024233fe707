"""Tests for main API endpoints and error handling."""

import pytest
from fastapi.testclient import TestClient

from lingocards.database import get_session_factory
from lingocards.domain.common.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    ConcurrencyConflictError,
    DomainError,
    ValidationError,
)
from lingocards.domain.identity.exceptions import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    RegistrationDisabledError,
    UserNotFoundError,
)
from lingocards.domain.learning.exceptions import (
    FlashcardNotFoundError,
    InvalidPerformanceRatingError,
)
from lingocards.exceptions import LingoCardsError
from lingocards.main import app, status_for_domain_error


def test_root_endpoint(client: TestClient) -> None:
    """Test root endpoint returns service name and version."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "LingoCards API"
    assert data["version"] == "0.1.0"


def test_health_endpoint(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_settings_endpoint_is_public(client: TestClient) -> None:
    response = client.get("/api/v1/settings")
    assert response.status_code == 200
    assert response.json() == {
        "feature_flags": {"user_registrations": True, "rate_limiting": False}
    }


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (InvalidCredentialsError(), 401),
        (EmailAlreadyExistsError("a@example.com"), 409),
        (ConcurrencyConflictError("Flashcard", 1), 409),
        (FlashcardNotFoundError(1), 404),
        (UserNotFoundError(1), 404),
        (AuthorizationError(), 403),
        (RegistrationDisabledError(), 403),
        (InvalidPerformanceRatingError(7), 400),
        (ValidationError("bad"), 400),
        (BusinessRuleViolationError("rule"), 400),
        (DomainError("anything"), 400),
    ],
)
def test_domain_error_status(error: DomainError, expected: int) -> None:
    assert status_for_domain_error(error) == expected


def test_unexpected_errors_are_hidden() -> None:
    @app.get("/boom-for-test")
    async def boom() -> None:
        raise RuntimeError("database password is hunter2")

    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/boom-for-test")
    finally:
        app.router.routes[:] = [
            route for route in app.router.routes if getattr(route, "path", None) != "/boom-for-test"
        ]

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred. Please try again later."}


def test_application_errors_keep_their_status() -> None:
    def unavailable() -> None:
        raise LingoCardsError("Database is not available", status_code=503)

    app.dependency_overrides[get_session_factory] = unavailable
    try:
        with TestClient(app) as test_client:
            response = test_client.get(
                "/api/v1/users/me", headers={"Authorization": "Bearer any-token"}
            )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json() == {"detail": "Database is not available"}
