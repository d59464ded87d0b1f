"""
Pytest configuration and fixtures.

The app is built with injected store handles:
- in-memory SQLite for the users table
- mongomock for the jobs collection
- fakeredis for rate limit counters
"""

import fakeredis
import mongomock
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.db.mongodb import MongoDatabase
from app.db.postgres import PostgresDatabase
from app.main import create_app
from app.schemas.schemas import JobCreate
from app.services.auth_service import AuthService
from app.services.job_service import JobService
from app.services.user_service import UserService
from tests.helpers import register_user


@pytest.fixture
def postgres():
    """Fresh SQLite database per test, shared across threads via StaticPool."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = PostgresDatabase(engine)
    db.init_schema()
    yield db
    engine.dispose()


@pytest.fixture
def mongo():
    return MongoDatabase(mongomock.MongoClient(), "job_tracker_test")


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def app(postgres, mongo, redis_client):
    return create_app(postgres=postgres, mongo=mongo, redis_client=redis_client)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def user_service(postgres):
    return UserService(postgres)


@pytest.fixture
def auth_service(user_service, settings):
    return AuthService(user_service, settings)


@pytest.fixture
def job_service(mongo):
    return JobService(mongo.get_collection("jobs"))


@pytest.fixture
def alice(client):
    """Registered user with a token."""
    return register_user(client, "Alice", "alice@example.com")


@pytest.fixture
def bob(client):
    """Second registered user, used to check isolation."""
    return register_user(client, "Bob", "bob@example.com")


@pytest.fixture
def sample_job_data():
    return {
        "company": "Acme Corp",
        "position": "Backend Engineer",
        "status": "interview",
        "jobType": "remote",
    }


@pytest.fixture
def make_jobs(job_service):
    """Insert jobs straight through the service: make_jobs(owner_id, count, **fields)."""

    def _make(owner_id: int, count: int = 1, **fields):
        created = []
        for i in range(count):
            payload = JobCreate(
                company=fields.get("company", f"Company {i}"),
                position=fields.get("position", f"Position {i}"),
                status=fields.get("status", "pending"),
                job_type=fields.get("job_type", "full-time"),
            )
            created.append(job_service.create_job(owner_id, payload, created_at=fields.get("created_at")))
        return created

    return _make
