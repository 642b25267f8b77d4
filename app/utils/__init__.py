from .responses import ok, error, not_found, validation_error_response, internal_error_response
from .auth import identify
from .validation import validate_schema
from .db import transactional
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'not_found',
    'validation_error_response',
    'internal_error_response',
    'identify',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'TokenError',
    'validate_schema',
    'transactional',
]
