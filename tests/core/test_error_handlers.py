"""Tests for the domain exception to HTTP response mapping."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.error_handlers import register_exception_handlers
from app.exceptions import (
    AppException,
    BackendUnavailableError,
    DuplicateApplicationError,
    EmptyMessageError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture(name="error_client")
def error_client_fixture():
    """A bare app with one route per exception."""
    app = FastAPI()
    register_exception_handlers(app)
    raised = {
        "not-found": NotFoundError("Opportunity", 7),
        "duplicate": DuplicateApplicationError(3),
        "transition": InvalidTransitionError("accepted", "rejected"),
        "empty": EmptyMessageError(),
        "validation": ValidationError("Bad value"),
        "unavailable": BackendUnavailableError("send the message"),
        "forbidden": InsufficientPermissionsError("update this application"),
        "credentials": InvalidCredentialsError(),
        "unknown": AppException("Something odd"),
    }

    @app.get("/raise/{name}")
    def raise_error(name: str):
        raise raised[name]

    return TestClient(app)


class TestErrorMapping:
    @pytest.mark.parametrize(
        "name, status_code",
        [
            ("not-found", 404),
            ("duplicate", 409),
            ("transition", 409),
            ("empty", 422),
            ("validation", 422),
            ("unavailable", 503),
            ("forbidden", 403),
            ("credentials", 401),
            ("unknown", 500),
        ],
    )
    def test_status_codes(self, error_client: TestClient, name, status_code):
        assert error_client.get(f"/raise/{name}").status_code == status_code

    def test_bodies(self, error_client: TestClient):
        assert error_client.get("/raise/not-found").json() == {
            "detail": "Opportunity with identifier '7' not found"
        }
        assert error_client.get("/raise/transition").json() == {
            "detail": "Cannot change application status from 'accepted' to 'rejected'",
            "current_status": "accepted",
        }
        assert error_client.get("/raise/empty").json() == {
            "detail": "Message content cannot be empty",
            "field": "content",
        }
        assert error_client.get("/raise/validation").json() == {"detail": "Bad value"}
        assert error_client.get("/raise/unavailable").json() == {
            "detail": "Could not send the message, please try again later"
        }
        assert error_client.get("/raise/forbidden").json() == {
            "detail": "Insufficient permissions to update this application"
        }

    def test_internal_error_hides_message(self, error_client: TestClient):
        response = error_client.get("/raise/unknown")
        assert response.json() == {"detail": "An internal error occurred"}

    def test_unauthorized_header(self, error_client: TestClient):
        response = error_client.get("/raise/credentials")
        assert response.headers["WWW-Authenticate"] == "Bearer"
