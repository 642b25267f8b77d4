import logging
from flask import Blueprint, request, jsonify, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from models.user import is_guest_id, new_guest_id
from app.schemas.auth import LoginRequest, RefreshRequest
from app.utils import (
    error,
    validate_schema,
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)
from app.version import API_PREFIX

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")


def _token_pair(user_id, guest=False):
    return {
        "access_token": create_access_token(user_id, guest=guest),
        "refresh_token": create_refresh_token(user_id),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
        "user_id": user_id,
        "guest": guest,
    }


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many login attempts from this IP",
)
@validate_schema(LoginRequest)
def login():
    """Issue tokens for a user id. Credentials are checked upstream."""
    user_id = request.validated_data.user_id
    if is_guest_id(user_id):
        return error("Reserved user id", status=400)
    logger.info("Session started for %s", user_id)
    return jsonify({"status": "success", **_token_pair(user_id)}), 200


@auth_bp.route("/guest", methods=["POST"])
def guest_login():
    return jsonify({"status": "success", **_token_pair(new_guest_id(), guest=True)}), 200


@auth_bp.route("/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    try:
        payload = decode_token(request.validated_data.refresh_token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)
    user_id = payload.get("sub")
    return jsonify({"status": "success", **_token_pair(user_id, guest=is_guest_id(user_id))}), 200
