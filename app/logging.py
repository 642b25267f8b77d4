import logging
import json
import os
from typing import Any, Dict
from opentelemetry.trace import get_current_span


# Customer contact and delivery details never reach INFO logs in clear text.
SENSITIVE_KEYS = {
    "token",
    "access",
    "refresh",
    "refresh_token",
    "email",
    "phone",
    "street",
    "zip_code",
    "delivery_address",
}


def _from_g(attr: str) -> str:
    try:
        from flask import g
        value = getattr(g, attr, None)
        return value or "n/a"
    except Exception:
        return "n/a"


class RequestContextFilter(logging.Filter):
    """Attach the request id and the acting user id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _from_g("request_id")
        record.user_id = _from_g("user_id")
        return True


class TraceIdFilter(logging.Filter):
    """Attach the active OpenTelemetry trace and span ids."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_current_span().get_span_context()
        if ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")
            record.span_id = format(ctx.span_id, "016x")
        else:
            record.trace_id = record.span_id = "n/a"
        return True


def mask(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: ("[REDACTED]" if key in SENSITIVE_KEYS else value)
        for key, value in data.items()
    }


class MaskingFilter(logging.Filter):
    """Redact sensitive keys in dict messages.

    DEBUG records outside production are left intact for local debugging.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = mask(record.msg)
        if isinstance(record.args, dict):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "user_id": getattr(record, "user_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        if isinstance(record.msg, dict):
            base.update(record.msg)
        else:
            base["message"] = record.getMessage()
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


def _level_for(app) -> int:
    name = os.getenv("LOG_LEVEL")
    if name:
        return getattr(logging, name.upper(), logging.INFO)
    return logging.DEBUG if app.config.get("DEBUG") else logging.INFO


def build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    for log_filter in (RequestContextFilter(), TraceIdFilter(), MaskingFilter()):
        handler.addFilter(log_filter)
    return handler


def configure_logging(app) -> None:
    """Route app, werkzeug and storefront loggers through one JSON handler."""
    level = _level_for(app)
    handler = build_handler()

    app.logger.handlers[:] = [handler]
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.handlers[:] = [handler]
    werkzeug_logger.setLevel(level)
