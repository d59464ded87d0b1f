"""
Tests for the error response shape and the health check.
"""

from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError

from app.core.auth import create_access_token
from app.core.errors import (
    AuthenticationError,
    DuplicateError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from app.services.job_service import JobService
from app.services.user_service import UserService
from tests.helpers import API, auth_headers

GENERIC_MESSAGE = "Something went wrong, try again later"


class TestErrorTaxonomy:
    """Status codes and messages carried by each error class"""

    def test_status_codes(self):
        assert ValidationError(["x"]).status_code == 400
        assert AuthenticationError().status_code == 401
        assert NotFoundError().status_code == 404
        assert DuplicateError("email").status_code == 400
        assert UnexpectedError().status_code == 500

    def test_validation_error_joins_messages(self):
        error = ValidationError(["Please provide name", "Please provide email"])
        assert error.message == "Please provide name, Please provide email"

    def test_validation_error_accepts_single_string(self):
        assert ValidationError("bad").errors == ["bad"]

    def test_defaults(self):
        assert AuthenticationError().message == "Authentication invalid"
        assert UnexpectedError().message == GENERIC_MESSAGE
        assert DuplicateError("email").field == "email"


def test_unknown_route(client):
    response = client.get(f"{API}/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"message": "Route does not exist"}


def test_malformed_json_body(client):
    response = client.post(
        f"{API}/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "message" in response.json()


def test_mongo_failure_is_generic_500(client, alice, monkeypatch):
    def broken(self, *args, **kwargs):
        raise PyMongoError("connection refused to 10.0.0.5:27017")

    monkeypatch.setattr(JobService, "list_jobs", broken)

    response = client.get(f"{API}/jobs", headers=alice["headers"])

    assert response.status_code == 500
    assert response.json() == {"message": GENERIC_MESSAGE}


def test_postgres_failure_is_generic_500(client, monkeypatch):
    def broken(self, *args, **kwargs):
        raise SQLAlchemyError("password authentication failed for user postgres")

    monkeypatch.setattr(UserService, "get_by_email", broken)

    response = client.post(
        f"{API}/auth/login",
        json={"email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 500
    assert response.json() == {"message": GENERIC_MESSAGE}


def test_unhandled_exception_is_generic_500(app, monkeypatch):
    def broken(self, *args, **kwargs):
        raise RuntimeError("internal detail")

    monkeypatch.setattr(JobService, "show_stats", broken)
    token = create_access_token({"sub": "1", "name": "Alice"})

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get(f"{API}/jobs/stats", headers=auth_headers(token))

    assert response.status_code == 500
    assert response.json() == {"message": GENERIC_MESSAGE}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"status", "postgres", "mongodb"}
    assert data["postgres"] == "connected"
    assert data["status"] in ("healthy", "degraded")
