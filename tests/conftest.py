"""
Shared fixtures.

Every test gets its own SQLite file under pytest's ``tmp_path`` and a
cheap bcrypt work factor so hashing does not dominate the run time.
"""
import base64
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from user_directory_api.app.core.cache import ResponseCache
from user_directory_api.app.core.config import Settings
from user_directory_api.app.core.db import init_db
from user_directory_api.app.core.security import PasswordHasher
from user_directory_api.app.main import create_app
from user_directory_api.app.repositories import SQLitePostRepository, SQLiteUserRepository
from user_directory_api.app.schemas.user import UserCreate
from user_directory_api.app.services.user_service import UserService


class TickingClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start=None):
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class CountingUserRepository(SQLiteUserRepository):
    """Records how often the by‑id lookup reaches the database."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.find_by_id_calls = 0

    def find_by_id(self, user_id):
        self.find_by_id_calls += 1
        return super().find_by_id(user_id)


def make_user_create(**overrides):
    data = {
        "username": "testuser",
        "email": "test@example.com",
        "password": "password123",
        "first_name": "John",
        "last_name": "Doe",
        "age": 25,
    }
    data.update(overrides)
    return UserCreate(**data)


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "users.db")
    init_db(path)
    return path


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def user_repository(db_path, clock):
    return CountingUserRepository(db_path, clock=clock)


@pytest.fixture
def post_repository(db_path, clock):
    return SQLitePostRepository(db_path, clock=clock)


@pytest.fixture
def users_cache():
    return ResponseCache("users")


@pytest.fixture
def user_service(user_repository, users_cache, clock):
    return UserService(
        repository=user_repository,
        password_hasher=PasswordHasher(rounds=4),
        cache=users_cache,
        clock=clock,
    )


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        database_url=str(tmp_path / "api.db"),
        password_hash_rounds=4,
        basic_auth_username="tester",
        basic_auth_password="secret",
        log_level="WARNING",
    )


@pytest.fixture
def auth_headers():
    token = base64.b64encode(b"tester:secret").decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_data():
    """Factory for valid ``UserCreate`` payloads."""
    return make_user_create
