"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

# Set test environment variables before importing app
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-jwt-unit-tests-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from chirpy.database import StoreManager, close_database, init_database  # noqa: E402
from chirpy.services.auth_service import AuthService  # noqa: E402
from chirpy.services.chirp_service import ChirpService  # noqa: E402
from chirpy.services.user_service import UserService  # noqa: E402


class FakeClock:
    """Controllable replacement for ``AuthService.clock``."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _reset_store_manager() -> Generator[None, None, None]:
    """Never let a process-wide store manager leak between tests."""
    close_database()
    yield
    close_database()


@pytest.fixture
def stores(tmp_path) -> StoreManager:
    """Store manager rooted in a fresh temporary directory."""
    return StoreManager(tmp_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth_service(stores, clock) -> AuthService:
    return AuthService(stores, clock=clock)


@pytest.fixture
def user_service(stores, auth_service) -> UserService:
    return UserService(stores, auth_service)


@pytest.fixture
def chirp_service(stores) -> ChirpService:
    return ChirpService(stores)


@pytest.fixture
def client(tmp_path):
    """TestClient whose stores live in a temporary directory.

    The store manager is created before the app starts, so the lifespan
    handler reuses it instead of opening the configured data directory.
    """
    from fastapi.testclient import TestClient
    from chirpy.main import app

    init_database(tmp_path)
    app.state.hit_counter.reset()
    with TestClient(app) as tc:
        yield tc
