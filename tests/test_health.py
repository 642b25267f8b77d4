
def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    json_data = response.get_json()
    assert json_data.get('status') == 'ok'
    assert json_data.get('storage') == 'local'
    assert json_data.get('products') == 24


def test_metrics_endpoint(client):
    client.get('/api/v1/products')
    response = client.get('/metrics')
    assert response.status_code == 200
    assert b'flask_http_request' in response.data


def test_order_counters(client):
    from prometheus_client import REGISTRY

    def placed():
        return REGISTRY.get_sample_value("storefront_orders_placed_total", {"payment_method": "cash"}) or 0

    before = placed()
    client.post('/api/v1/cart/add', json={'product_id': 'p006'})
    client.post('/api/v1/orders', json={
        'delivery_address': {'street': '1 Lane', 'city': 'Pune', 'state': 'MH', 'zip_code': '411001'},
        'payment_method': 'cash',
    })
    assert placed() == before + 1
