import datetime as dt

import jwt
import pytest

from app.utils import decode_token, create_access_token, TokenError
from app.version import API_PREFIX


def _get_tokens(c, user_id="auth1"):
    r = c.post(f"{API_PREFIX}/auth/login", json={"user_id": user_id})
    assert r.status_code == 200
    return r.get_json()


def test_login_issues_token_pair(client):
    toks = _get_tokens(client, "carol")
    assert toks["user_id"] == "carol"
    assert toks["guest"] is False
    assert toks["expires_in"] == 15 * 60


def test_access_token_identifies_user(client, app):
    toks = _get_tokens(client, "carol")
    with app.app_context():
        assert decode_token(toks["access_token"])["sub"] == "carol"
    headers = {"Authorization": f"Bearer {toks['access_token']}"}
    client.post(f"{API_PREFIX}/cart/add", json={"product_id": "p006"}, headers=headers)
    assert app.extensions["storefront"].cart_for("carol").quantity_of("p006") == 1
    assert client.get(f"{API_PREFIX}/cart").get_json()["cart"] == []


def test_login_rejects_guest_id(client):
    r = client.post(f"{API_PREFIX}/auth/login", json={"user_id": "guest"})
    assert r.status_code == 400


def test_login_rejects_guest_session_ids(client):
    r = client.post(f"{API_PREFIX}/auth/login", json={"user_id": "guest:abc123"})
    assert r.status_code == 400


def test_guest_session(client, app):
    r = client.post(f"{API_PREFIX}/auth/guest")
    data = r.get_json()
    assert data["guest"] is True
    assert data["user_id"].startswith("guest:")
    with app.app_context():
        payload = decode_token(data["access_token"])
    assert payload["sub"] == data["user_id"]
    assert payload["guest"] is True


def test_each_guest_session_gets_its_own_id(client):
    first = client.post(f"{API_PREFIX}/auth/guest").get_json()["user_id"]
    second = client.post(f"{API_PREFIX}/auth/guest").get_json()["user_id"]
    assert first != second


def test_guest_refresh_keeps_guest_flag(client):
    toks = client.post(f"{API_PREFIX}/auth/guest").get_json()
    r = client.post(f"{API_PREFIX}/auth/refresh", json={"refresh_token": toks["refresh_token"]})
    assert r.get_json()["user_id"] == toks["user_id"]
    assert r.get_json()["guest"] is True


def test_expired_access_token_blocked(client, app):
    past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)
    expired = jwt.encode({"sub": "x", "type": "access", "exp": past}, app.config["JWT_SECRET"], algorithm="HS256")
    r = client.get(f"{API_PREFIX}/cart", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "token expired"


def test_garbage_token_blocked(client):
    r = client.get(f"{API_PREFIX}/cart", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_refresh_token_cannot_be_used_as_access(client):
    toks = _get_tokens(client, "auth2")
    r = client.get(f"{API_PREFIX}/cart", headers={"Authorization": f"Bearer {toks['refresh_token']}"})
    assert r.status_code == 401


def test_refresh_returns_new_access(client):
    toks = _get_tokens(client, "auth2")
    r = client.post(f"{API_PREFIX}/auth/refresh", json={"refresh_token": toks["refresh_token"]})
    assert r.status_code == 200
    new_access = r.get_json()["access_token"]
    r2 = client.get(f"{API_PREFIX}/orders", headers={"Authorization": f"Bearer {new_access}"})
    assert r2.status_code == 200


def test_refresh_rejects_access_token(client):
    toks = _get_tokens(client, "auth3")
    r = client.post(f"{API_PREFIX}/auth/refresh", json={"refresh_token": toks["access_token"]})
    assert r.status_code == 401


def test_decode_token_outside_request(app):
    with app.app_context():
        token = create_access_token("dave", guest=False)
        assert decode_token(token)["guest"] is False
        with pytest.raises(TokenError, match="refresh"):
            decode_token(token, expected_type="refresh")
