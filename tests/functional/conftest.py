"""Functional test bootstrap for the poll service.

Every test gets a fresh in-memory SQLite database: the cached engine is
disposed before and after each test, and `create_app` applies migrations
against the new engine. Environment variables are pinned before any
`pollbox` import so no test ever reads a developer's local database.
"""

from __future__ import annotations

import os

import pytest

os.environ["TEST_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
os.environ.pop("ADMIN_PASSWORD", None)

from fastapi.testclient import TestClient  # noqa: E402

from pollbox.client.api_client import PollboxClient  # noqa: E402
from pollbox.client.session_state import SessionState  # noqa: E402
from pollbox.config import AdminConfig, AppConfig, ClientConfig, DatabaseConfig, HttpConfig  # noqa: E402
from pollbox.db.base import reset_engine  # noqa: E402
from pollbox.logic.events import get_buffered_events  # noqa: E402
from pollbox.main import create_app  # noqa: E402

ADMIN_PASSWORD = "s3cret-admin"


def make_config(password: str | None = ADMIN_PASSWORD) -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(dsn=os.environ["TEST_DATABASE_URL"]),
        admin=AdminConfig(password=password),
        http=HttpConfig(),
        client=ClientConfig(),
    )


@pytest.fixture(autouse=True)
def fresh_database():
    """Dispose the shared engine so each test starts with an empty database."""
    reset_engine()
    get_buffered_events(clear=True)
    yield
    reset_engine()


@pytest.fixture
def app():
    return create_app(make_config())


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_password() -> str:
    return ADMIN_PASSWORD


@pytest.fixture
def misconfigured_client() -> TestClient:
    """Client for an app started without an admin password."""
    return TestClient(create_app(make_config(password=None)))


@pytest.fixture
def repo(app):
    return app.state.question_repository


@pytest.fixture
def session_state(tmp_path) -> SessionState:
    return SessionState.load(tmp_path / "state.json")


@pytest.fixture
def poll_client(client, session_state) -> PollboxClient:
    return PollboxClient(session_state, http=client)


@pytest.fixture
def variant_question(repo):
    return repo.create(
        {
            "title": "Favourite colour",
            "questionType": "variant",
            "variants": [{"text": "Red"}, {"text": "Green"}, {"text": "Blue"}],
            "maxSelections": 2,
        }
    )


@pytest.fixture
def text_question(repo):
    return repo.create({"title": "Any feedback?", "description": "Tell us anything"})
