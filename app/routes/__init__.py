from .auth import auth_bp
from .store import store_bp


__all__ = [
    'auth_bp',
    'store_bp',
]
