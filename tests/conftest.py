"""
Shared test fixtures.

Environment variables are set before the application is imported so the
cached settings pick up the test database and a disabled rate limiter.
"""

import os
from pathlib import Path

TEST_DB_PATH = Path("./test_weather_backend.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OPENWEATHER_API_KEY"] = "test-api-key"
os.environ["OPENWEATHER_BASE_URL"] = "https://owm.test/data/2.5"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from weather_backend.config import get_settings  # noqa: E402
from weather_backend.dependencies.weather import get_weather_gateway  # noqa: E402
from weather_backend.main import app  # noqa: E402
from weather_backend.services.weather import WeatherGateway  # noqa: E402
from tests.factories import FakeProvider  # noqa: E402

@pytest.fixture
def fake_provider():
    """Fresh fake provider per test."""
    return FakeProvider()

@pytest.fixture(scope="session")
def app_client():
    """Application client with the lifespan (database bootstrap) running."""
    with TestClient(app) as test_client:
        yield test_client
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

@pytest.fixture
def client(app_client):
    """Test client fixture; dependency overrides are reset after each test."""
    yield app_client
    app.dependency_overrides.clear()

@pytest.fixture
def provider_client(client, fake_provider):
    """Test client whose weather gateway talks to the fake provider."""
    settings = get_settings()

    def _gateway():
        return WeatherGateway(settings, fake_provider.client())

    app.dependency_overrides[get_weather_gateway] = _gateway
    return client
