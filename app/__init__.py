import os
import uuid

from dotenv import load_dotenv
from flask import Flask, g, request
from flask_cors import CORS
from flasgger import Swagger
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics

import celery_app  # noqa: F401  registers the grocio Celery app for shared tasks
import extensions
from app import metrics as storefront_metrics
from app.api import register_api_v1
from app.cli import register_cli
from app.config import get_config_class
from app.errors import errors_bp
from app.logging import configure_logging
from app.services.scheduler import build_scheduler
from app.services.storage import build_storage
from app.services.storefront import Storefront
from app.tasks import notifications
from app.telemetry import init_tracing
from app.version import API_PREFIX
from models import db
import logging

logger = logging.getLogger(__name__)

API_TAGS = [
    {"name": "Catalog", "description": "Products, search and categories"},
    {"name": "Cart", "description": "Cart lines and pricing"},
    {"name": "Wishlist", "description": "Saved products"},
    {"name": "Orders", "description": "Checkout, history and tracking"},
    {"name": "Profile", "description": "Profile and saved addresses"},
    {"name": "Auth", "description": "Bearer tokens for users and guests"},
]


def _allowed_origins(value):
    if not isinstance(value, str):
        return value or "*"
    value = value.strip()
    if value == "*":
        return "*"
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def _init_http(app):
    extensions.limiter.init_app(app)
    app.limiter = extensions.limiter

    Swagger(
        app,
        config={
            "headers": [],
            "specs": [
                {
                    "endpoint": "apispec",
                    "route": "/apispec.json",
                    "rule_filter": lambda rule: rule.rule.startswith(f"{API_PREFIX}/"),
                    "model_filter": lambda tag: True,
                }
            ],
            "swagger_ui": True,
            "specs_route": "/docs/",
        },
        template={"tags": API_TAGS},
    )

    # A private registry per test app; the default one rejects re-registration.
    registry = CollectorRegistry() if app.config.get("TESTING") else None
    exporter = PrometheusMetrics(app, path="/metrics", registry=registry)
    if not app.config.get("TESTING") and not os.environ.get("METRICS_APP_INFO_SET"):
        exporter.info("app_info", "Application info", version="1.0.0")
        os.environ["METRICS_APP_INFO_SET"] = "1"

    CORS(
        app,
        origins=_allowed_origins(app.config.get("CORS_ALLOWED_ORIGINS", "*")),
        supports_credentials=True,
        expose_headers=["X-Request-ID", "traceparent"],
    )


def _register_request_hooks(app):
    @app.before_request
    def _set_request_id():
        g.request_id = (request.headers.get("X-Request-ID") or uuid.uuid4().hex)[:100]
        app.logger.info(f"request start {request.method} {request.path}")

    @app.after_request
    def _decorate_response(resp):
        if getattr(g, "request_id", None):
            resp.headers["X-Request-ID"] = g.request_id

        carrier = {}
        TraceContextTextMapPropagator().inject(carrier)
        if carrier.get("traceparent"):
            resp.headers["traceparent"] = carrier["traceparent"]

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        exposed = [h.strip() for h in resp.headers.get("Access-Control-Expose-Headers", "").split(",") if h.strip()]
        for header in ("X-Request-ID", "traceparent"):
            if header not in exposed:
                exposed.append(header)
        resp.headers["Access-Control-Expose-Headers"] = ",".join(exposed)
        return resp


def _init_storefront(app):
    storefront = Storefront.from_config(app.config, build_storage(app), build_scheduler(app.config))
    app.extensions["storefront"] = storefront
    storefront_metrics.init_app(app)
    notifications.init_app(app, storefront)
    storefront.start(app.config.get("CATALOG_PATH"))
    logger.info(
        "Storefront ready: %d products, %s storage, %s scheduler",
        len(storefront.catalog.products),
        app.config.get("STORAGE_BACKEND"),
        app.config.get("ORDER_SCHEDULER"),
    )
    return storefront


def create_app(config_object=None):
    """Application factory."""
    load_dotenv()
    app = Flask(__name__)
    app.config.from_object(config_object or get_config_class())

    configure_logging(app)
    register_cli(app)
    _init_http(app)

    app.register_blueprint(errors_bp)
    if app.config.get("TESTING"):
        from app.test_support import test_support_bp
        app.register_blueprint(test_support_bp)
        app.register_blueprint(test_support_bp, url_prefix=f"{API_PREFIX}/test_support", name="test_support_bp_v1")
    register_api_v1(app)
    _register_request_hooks(app)

    db.init_app(app)
    init_tracing(app)
    with app.app_context():
        # Only the document table lives in SQL; create it if missing.
        db.create_all()

    storefront = _init_storefront(app)

    @app.route("/health")
    def health():
        return {
            "status": "ok",
            "storage": app.config.get("STORAGE_BACKEND"),
            "products": len(storefront.catalog.products),
        }, 200

    return app
