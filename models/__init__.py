from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .document import Document  # noqa: F401
from .product import Product, Category  # noqa: F401
from .cart import CartLine  # noqa: F401
from .user import Address, User, GUEST_USER_ID  # noqa: F401
from .order import Order, OrderStatus, PaymentMethod  # noqa: F401
