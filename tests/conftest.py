import os
import tempfile
from pathlib import Path

import pytest

TEST_DIR = Path(tempfile.mkdtemp(prefix="competency-tracker-"))
DB_PATH = TEST_DIR / "test.db"

ADMIN_EMAIL = "admin@example.com"
PASSWORD = "secret123"
SIGNATURE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg=="

# Settings are read when the app modules are imported
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["BUILTIN_ADMIN_EMAILS"] = f'["{ADMIN_EMAIL}"]'
os.environ["SECRET_KEY"] = "test-secret-key"

from fastapi.testclient import TestClient  # noqa: E402

from competency_tracker.main import app  # noqa: E402


@pytest.fixture
def client():
    """Fresh database per test; the lifespan creates tables and seeds."""
    if DB_PATH.exists():
        DB_PATH.unlink()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    def _register(email, password=PASSWORD, first_name="Ada", last_name="Lovelace",
                  cohort="2024A", company="Acme Mill"):
        return client.post(
            "/api/register",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "password": password,
                "cohort": cohort,
                "company": company,
            },
        )
    return _register


@pytest.fixture
def login_as(client):
    def _login(email, password=PASSWORD):
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp
    return _login


@pytest.fixture
def apprentice(register, login_as):
    """Registered and logged-in apprentice; returns the email."""
    email = "ada@example.com"
    assert register(email).status_code == 200
    login_as(email)
    return email


@pytest.fixture
def admin(register, login_as):
    """The builtin admin, registered and logged in; returns the email."""
    assert register(ADMIN_EMAIL, first_name="Grace", last_name="Hopper", cohort="Staff").status_code == 200
    login_as(ADMIN_EMAIL)
    return ADMIN_EMAIL


def board_items(resp_json):
    return [item for items in resp_json["competencies"].values() for item in items]


@pytest.fixture
def board(client):
    """Current user's competencies flattened to {id: item}."""
    def _board():
        resp = client.get("/api/competencies")
        assert resp.status_code == 200, resp.text
        return {item["id"]: item for item in board_items(resp.json())}
    return _board
