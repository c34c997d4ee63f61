import pytest
from unittest.mock import patch

from fastapi.testclient import TestClient
from recipeshare.core.config import settings
from recipeshare.core.rate_limit import limiter
from tests.helpers import API, unique_handle

# "10/minute" -> 10
AUTH_LIMIT = int(settings.AUTH_RATE_LIMIT.split("/")[0])


@pytest.fixture
def enabled_limiter():
    limiter.reset()
    with patch.object(limiter, "enabled", True):
        yield limiter
    limiter.reset()


def test_login_is_rate_limited(client: TestClient, enabled_limiter):
    credentials = {"email": "nobody-rate@example.com", "password": "password1"}

    for _ in range(AUTH_LIMIT):
        assert client.post(f"{API}/auth/login", json=credentials).status_code == 404

    response = client.post(f"{API}/auth/login", json=credentials)
    assert response.status_code == 429


def test_register_is_rate_limited(client: TestClient, enabled_limiter):
    # Duplicate registrations still reach the handler, so they count toward the limit
    handle = unique_handle("limited")
    payload = {
        "handle": handle,
        "email": f"{handle}@example.com",
        "password": "password1",
        "confirmPassword": "password1",
    }
    statuses = [client.post(f"{API}/auth/register", json=payload).status_code for _ in range(AUTH_LIMIT + 1)]

    assert statuses[0] == 201
    assert set(statuses[1:AUTH_LIMIT]) == {409}
    assert statuses[AUTH_LIMIT] == 429


def test_limiter_is_off_when_disabled(client: TestClient):
    assert limiter.enabled is False
    credentials = {"email": "nobody-unlimited@example.com", "password": "password1"}
    for _ in range(AUTH_LIMIT + 1):
        assert client.post(f"{API}/auth/login", json=credentials).status_code == 404
