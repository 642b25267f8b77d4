import threading
from typing import List, Optional

from app.services import events
from models.product import Product


class Wishlist:
    def __init__(self, user_id: str, products: Optional[List[Product]] = None, lock=None):
        self.user_id = user_id
        self._items = {}
        for product in products or []:
            self._items.setdefault(product.id, product)
        self._lock = lock or threading.RLock()

    @property
    def items(self) -> List[Product]:
        with self._lock:
            return list(self._items.values())

    def __len__(self):
        return len(self._items)

    def contains(self, product_id: str) -> bool:
        return product_id in self._items

    def add(self, product: Product) -> bool:
        with self._lock:
            if product.id in self._items:
                return False
            self._items[product.id] = product
            self._changed()
            return True

    def remove(self, product_id: str) -> bool:
        with self._lock:
            if self._items.pop(product_id, None) is None:
                return False
            self._changed()
            return True

    def toggle(self, product: Product) -> bool:
        """Flip membership; returns True when the product is now wishlisted."""
        with self._lock:
            if product.id in self._items:
                self.remove(product.id)
                return False
            self.add(product)
            return True

    def clear(self) -> None:
        with self._lock:
            self._items = {}
            self._changed()

    def to_document(self):
        with self._lock:
            return [p.model_dump(mode="json") for p in self._items.values()]

    @classmethod
    def from_document(cls, user_id: str, raw, lock=None) -> "Wishlist":
        return cls(user_id, [Product.model_validate(item) for item in raw or []], lock=lock)

    def _changed(self) -> None:
        events.wishlist_changed.send(self, user_id=self.user_id)
