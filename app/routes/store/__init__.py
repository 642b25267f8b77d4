from flask import Blueprint
from app.version import API_PREFIX
from app.utils import identify

store_bp = Blueprint("store", __name__, url_prefix=API_PREFIX)


@store_bp.before_request
@identify
def _resolve_user():
    """Attach the acting user (or the guest sentinel) to the request."""
    return None


def with_warning(storefront, payload):
    """Surface a storage failure recorded while serving this request."""
    warning = storefront.pop_error()
    if warning:
        payload["warning"] = warning
    return payload


from . import catalog  # noqa: E402
from . import cart  # noqa: E402
from . import wishlist  # noqa: E402
from . import orders  # noqa: E402
from . import profile  # noqa: E402
