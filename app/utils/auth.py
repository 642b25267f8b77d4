from functools import wraps
from flask import request, g, session
from models.user import is_guest_id, new_guest_id
from .responses import error
from .jwt import decode_token, TokenError


def _cookie_guest_id():
    guest_id = session.get("guest_id")
    if not is_guest_id(guest_id):
        guest_id = new_guest_id()
        session["guest_id"] = guest_id
    return guest_id


def identify(func):
    """Resolve the acting user from the bearer token.

    Without an ``Authorization`` header the request belongs to a guest session
    kept in the signed session cookie; a bad token is a 401. The user id is
    stored on ``g.user_id``.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization", "")
        if not auth:
            g.user_id = _cookie_guest_id()
            g.is_guest = True
            return func(*args, **kwargs)
        token = auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth
        try:
            payload = decode_token(token, expected_type="access")
        except TokenError as e:
            return error(str(e), status=401)
        g.user_id = payload["sub"]
        g.is_guest = bool(payload.get("guest")) or is_guest_id(g.user_id)
        return func(*args, **kwargs)

    return wrapper
