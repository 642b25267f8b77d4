"""Composition root for the storefront state.

``Storefront`` owns the catalog, one cart, wishlist and profile per user, and
the order service. It listens to their change signals and writes snapshots to the
configured storage. Write failures are recorded in ``last_error`` and never
undo the in-memory change that triggered them.
"""
import logging
from datetime import timedelta
from typing import Dict, Optional

from pydantic import ValidationError as SchemaError

from app.services import events
from app.services.cart import Cart
from app.services.catalog import Catalog
from app.services.errors import StorageError, ValidationError
from app.services.lifecycle import DEFAULT_INTERVAL_SECONDS
from app.services.orders import ESTIMATED_DELIVERY, OrderService
from app.services.pricing import DEFAULT_POLICY, PricingPolicy
from app.services.scheduler import Scheduler
from app.services.storage import Storage
from app.services.wishlist import Wishlist
from models.order import Order, PaymentMethod
from models.user import Address, User

logger = logging.getLogger(__name__)

ORDERS_KEY = "orders"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def cart_key(user_id: str) -> str:
    return f"cart:{user_id}"


def wishlist_key(user_id: str) -> str:
    return f"wishlist:{user_id}"


class Storefront:
    def __init__(
        self,
        storage: Storage,
        scheduler: Scheduler,
        policy: PricingPolicy = DEFAULT_POLICY,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        estimated_delivery: timedelta = ESTIMATED_DELIVERY,
        allow_cancel_delivered: bool = False,
        catalog: Optional[Catalog] = None,
    ):
        self.storage = storage
        self.scheduler = scheduler
        self.policy = policy
        self.catalog = catalog or Catalog()
        self.orders = OrderService(
            scheduler,
            policy=policy,
            interval=interval,
            estimated_delivery=estimated_delivery,
            allow_cancel_delivered=allow_cancel_delivered,
        )
        self.last_error: Optional[str] = None
        self._carts: Dict[str, Cart] = {}
        self._wishlists: Dict[str, Wishlist] = {}
        self._profiles: Dict[str, User] = {}
        events.order_placed.connect(self._persist_orders, sender=self.orders)
        events.order_status_changed.connect(self._persist_orders, sender=self.orders)

    @classmethod
    def from_config(cls, config, storage: Storage, scheduler: Scheduler) -> "Storefront":
        return cls(
            storage,
            scheduler,
            policy=PricingPolicy.from_config(config),
            interval=float(config.get("ORDER_STATUS_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS)),
            estimated_delivery=timedelta(minutes=int(config.get("ESTIMATED_DELIVERY_MINUTES", 60))),
            allow_cancel_delivered=bool(config.get("ALLOW_CANCEL_DELIVERED", False)),
        )

    @property
    def lock(self):
        return self.scheduler.lock

    def start(self, catalog_path: Optional[str] = None) -> None:
        self.catalog.load(self.storage, catalog_path)
        if self.catalog.error_message:
            self.last_error = self.catalog.error_message
        self._restore_orders()

    def shutdown(self) -> None:
        self.orders.tracker.stop_all()
        self.scheduler.shutdown()

    def pop_error(self) -> Optional[str]:
        """Return and clear the last user-facing storage error."""
        with self.lock:
            message, self.last_error = self.last_error, None
            return message

    # ----------------------------------------------------------------- carts

    def cart_for(self, user_id: str) -> Cart:
        with self.lock:
            cart = self._carts.get(user_id)
            if cart is None:
                raw = self._load(cart_key(user_id))
                try:
                    cart = Cart.from_document(user_id, raw, lock=self.lock)
                except SchemaError as e:
                    logger.warning("Discarding unreadable cart for %s: %s", user_id, e)
                    cart = Cart(user_id, lock=self.lock)
                self._carts[user_id] = cart
                events.cart_changed.connect(self._persist_cart, sender=cart)
            return cart

    def add_to_cart(self, user_id: str, product_id: str, quantity: int = 1):
        """Add a catalog product; returns None when the product is unknown."""
        product = self.catalog.get(product_id)
        if product is None:
            return None
        if not product.in_stock:
            raise ValidationError("Product out of stock")
        return self.cart_for(user_id).add(product, quantity)

    def checkout(
        self,
        user_id: str,
        address: Address,
        payment_method: PaymentMethod = PaymentMethod.CARD,
        notes: Optional[str] = None,
    ) -> Order:
        with self.scheduler.critical():
            cart = self.cart_for(user_id)
            if cart.is_empty:
                raise ValidationError("Cart is empty")
            order = self.orders.place_order(user_id, cart.snapshot(), address, payment_method, notes)
            cart.clear()
            return order

    # ------------------------------------------------------------- wishlists

    def wishlist_for(self, user_id: str) -> Wishlist:
        with self.lock:
            wishlist = self._wishlists.get(user_id)
            if wishlist is None:
                raw = self._load(wishlist_key(user_id))
                try:
                    wishlist = Wishlist.from_document(user_id, raw, lock=self.lock)
                except SchemaError as e:
                    logger.warning("Discarding unreadable wishlist for %s: %s", user_id, e)
                    wishlist = Wishlist(user_id, lock=self.lock)
                self._wishlists[user_id] = wishlist
                events.wishlist_changed.connect(self._persist_wishlist, sender=wishlist)
            return wishlist

    def toggle_wishlist(self, user_id: str, product_id: str) -> Optional[bool]:
        product = self.catalog.get(product_id)
        if product is None:
            return None
        return self.wishlist_for(user_id).toggle(product)

    # -------------------------------------------------------------- profiles

    def profile_for(self, user_id: str) -> User:
        with self.lock:
            user = self._profiles.get(user_id)
            if user is None:
                raw = self._load(user_key(user_id))
                if raw:
                    try:
                        user = User.model_validate(raw)
                    except SchemaError as e:
                        logger.warning("Discarding unreadable profile for %s: %s", user_id, e)
                if user is None:
                    user = User.blank(user_id, self.scheduler.now())
                self._profiles[user_id] = user
            return user

    def update_profile(self, user_id: str, **fields) -> User:
        """Overwrite the given profile fields; ``None`` values are skipped."""
        with self.lock:
            user = self.profile_for(user_id)
            for name, value in fields.items():
                if value is not None:
                    setattr(user, name, value)
            self._persist_profile(user)
            return user

    def add_address(self, user_id: str, address: Address) -> Address:
        with self.lock:
            user = self.profile_for(user_id)
            user.add_address(address)
            self._persist_profile(user)
            return address

    def remove_address(self, user_id: str, address_id: str) -> Optional[Address]:
        with self.lock:
            user = self.profile_for(user_id)
            removed = user.remove_address(address_id)
            if removed is not None:
                self._persist_profile(user)
            return removed

    def set_default_address(self, user_id: str, address_id: str) -> Optional[Address]:
        with self.lock:
            user = self.profile_for(user_id)
            address = user.set_default_address(address_id)
            if address is not None:
                self._persist_profile(user)
            return address

    # ----------------------------------------------------------- persistence

    def _restore_orders(self) -> None:
        raw = self._load(ORDERS_KEY)
        if not raw:
            return
        try:
            orders = [Order.model_validate(item) for item in raw]
        except SchemaError as e:
            logger.warning("Discarding unreadable order history: %s", e)
            return
        self.orders.load(orders)
        logger.info("Restored %d orders", len(orders))

    def _load(self, key: str):
        try:
            return self.storage.load(key)
        except StorageError as e:
            self._record_failure(key, e)
            return None

    def _save(self, key: str, data) -> None:
        try:
            self.storage.save(key, data)
        except StorageError as e:
            self._record_failure(key, e)

    def _record_failure(self, key: str, error: Exception) -> None:
        logger.error("Storage failure for %s: %s", key, error)
        self.last_error = str(error)
        events.storage_failed.send(self, key=key, message=str(error))

    def _persist_cart(self, sender: Cart, **kwargs) -> None:
        self._save(cart_key(sender.user_id), sender.to_document())

    def _persist_wishlist(self, sender: Wishlist, **kwargs) -> None:
        self._save(wishlist_key(sender.user_id), sender.to_document())

    def _persist_profile(self, user: User) -> None:
        self._save(user_key(user.id), user.model_dump(mode="json"))

    def _persist_orders(self, sender, **kwargs) -> None:
        self._save(ORDERS_KEY, self.orders.to_document())
