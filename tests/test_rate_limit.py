import pytest

from app import create_app
from app.config import TestingConfig
from app.version import API_PREFIX


class RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    ORDER_LIMIT_PER_IP = "2 per hour"
    LOGIN_LIMIT_PER_IP = "3 per hour"


@pytest.fixture()
def limited_client():
    app = create_app(RateLimitedConfig)
    yield app.test_client()
    app.extensions["storefront"].shutdown()


def test_login_rate_limit(limited_client):
    env = {"REMOTE_ADDR": "10.0.0.1"}
    for i in range(4):
        r = limited_client.post(f"{API_PREFIX}/auth/login", json={"user_id": f"u{i}"}, environ_base=env)
    assert r.status_code == 429
    data = r.get_json()
    assert data["status"] == "error"
    assert data["code"] == 429


def test_order_rate_limit(limited_client):
    env = {"REMOTE_ADDR": "10.0.0.2"}
    for i in range(3):
        r = limited_client.post(f"{API_PREFIX}/orders", json={"dummy": "ok"}, environ_base=env)
    assert r.status_code == 429


def test_other_ip_not_limited(limited_client):
    for i in range(3):
        limited_client.post(f"{API_PREFIX}/orders", json={}, environ_base={"REMOTE_ADDR": "10.0.0.3"})
    r = limited_client.get(f"{API_PREFIX}/products", environ_base={"REMOTE_ADDR": "10.0.0.4"})
    assert r.status_code == 200
