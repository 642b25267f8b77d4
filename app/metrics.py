from flask import request
from prometheus_client import Counter

from app.services import events

ORDERS_PLACED = Counter(
    "storefront_orders_placed_total",
    "Orders placed through checkout",
    ["payment_method"],
)

ORDER_STATUS_TRANSITIONS = Counter(
    "storefront_order_status_transitions_total",
    "Order status changes, automatic or by cancellation",
    ["status"],
)

STORAGE_FAILURES = Counter(
    "storefront_storage_failures_total",
    "Snapshot loads or saves that failed",
)

# Counter for HTTP errors
ERROR_COUNTER = Counter(
    "flask_error_total",
    "Count of HTTP responses with status >= 400",
    ["endpoint", "method", "code"],
)


def _on_order_placed(sender, order, **kwargs):
    ORDERS_PLACED.labels(order.payment_method.value).inc()


def _on_status_changed(sender, order, **kwargs):
    ORDER_STATUS_TRANSITIONS.labels(order.status.value).inc()


def _on_storage_failed(sender, **kwargs):
    STORAGE_FAILURES.inc()


def init_app(app):
    """Attach metric hooks to the app and the storefront signals."""
    events.order_placed.connect(_on_order_placed)
    events.order_status_changed.connect(_on_status_changed)
    events.storage_failed.connect(_on_storage_failed)

    @app.after_request
    def track_errors(resp):
        if resp.status_code >= 400:
            endpoint = request.endpoint or "unknown"
            ERROR_COUNTER.labels(endpoint, request.method, resp.status_code).inc()
        return resp
