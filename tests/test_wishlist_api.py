from app.version import API_PREFIX


def test_toggle_wishlist(client):
    resp = client.post(f"{API_PREFIX}/wishlist/toggle", json={"product_id": "p017"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["wishlisted"] is True
    assert [p["id"] for p in data["wishlist"]] == ["p017"]

    resp = client.post(f"{API_PREFIX}/wishlist/toggle", json={"product_id": "p017"})
    assert resp.get_json()["wishlisted"] is False
    assert resp.get_json()["count"] == 0


def test_toggle_unknown_product(client):
    resp = client.post(f"{API_PREFIX}/wishlist/toggle", json={"product_id": "nope"})
    assert resp.status_code == 404


def test_view_remove_and_clear(client):
    client.post(f"{API_PREFIX}/wishlist/toggle", json={"product_id": "p017"})
    client.post(f"{API_PREFIX}/wishlist/toggle", json={"product_id": "p004"})
    assert client.get(f"{API_PREFIX}/wishlist").get_json()["count"] == 2

    resp = client.post(f"{API_PREFIX}/wishlist/remove", json={"product_id": "p017"})
    assert [p["id"] for p in resp.get_json()["wishlist"]] == ["p004"]
    resp = client.post(f"{API_PREFIX}/wishlist/remove", json={"product_id": "p017"})
    assert resp.status_code == 404

    resp = client.post(f"{API_PREFIX}/wishlist/clear")
    assert resp.get_json()["wishlist"] == []
