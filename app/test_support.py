import logging
from flask import Blueprint, request
from extensions import get_storefront
from app.services.scheduler import ManualScheduler
from app.utils.responses import ok, error


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info("test log line")
    return ok({"logged": True})


@test_support_bp.route("/__clock/advance", methods=["POST"])
def __clock_advance():
    """Move the virtual order clock forward (manual scheduler only)."""
    scheduler = get_storefront().scheduler
    if not isinstance(scheduler, ManualScheduler):
        return error("Virtual clock not in use", status=400)
    seconds = float((request.get_json(silent=True) or {}).get("seconds", 0))
    scheduler.advance(seconds)
    return ok({"now": scheduler.now().isoformat(), "pending": scheduler.pending})
