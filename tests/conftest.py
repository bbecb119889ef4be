"""Pytest configuration and shared fixtures for the test suite."""

from typing import Dict

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from resource_api.app.core.config import Settings
from resource_api.app.core.security import create_access_token
from resource_api.app.main import create_app

TEST_SECRET = "test-secret"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's rate limit and secret."""
    return Settings(secret_key=TEST_SECRET, rate_limit_enabled=False, debug=False)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    token = create_access_token({"sub": "tester@example.com"}, secret_key=TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}


def user_payload(name: str) -> Dict[str, str]:
    return {"user_name": name, "email": f"{name}@example.com", "birth_date": "1990-01-01"}
