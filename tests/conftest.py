# tests/conftest.py

from datetime import date

import pytest

from api import create_app
from models import Member
from store import InMemoryMemberStore, InMemoryUserStore, SqliteMemberStore, SqliteUserStore

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def today():
    return date(2024, 1, 20)


@pytest.fixture
def january_member():
    """Member starting 2024-01-01 for 30 days (ends 2024-01-31)."""
    return Member(
        id="m1",
        name="Ahmed Hassan",
        phone_number="0100000001",
        start_date="2024-01-01",
        end_date="2024-01-31",
        duration=30,
        price=300.0,
    )


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "test_gym.db"


@pytest.fixture
def sqlite_members(db_file):
    return SqliteMemberStore(db_file)


@pytest.fixture
def sqlite_users(db_file):
    return SqliteUserStore(db_file)


@pytest.fixture
def client():
    app = create_app(InMemoryMemberStore(), InMemoryUserStore(), secret=TEST_SECRET)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/auth", json={"action": "register", "email": "owner@gym.test", "password": "pw123456"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}
