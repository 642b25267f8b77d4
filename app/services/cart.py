import threading
from decimal import Decimal
from typing import List, Optional

from app.services import events
from app.services.errors import ValidationError
from app.services.pricing import DEFAULT_POLICY, PricingPolicy, Totals, compute_totals
from models.cart import CartLine
from models.product import Product


class Cart:
    """One user's cart. Lines are unique by product id and never hold 0."""

    def __init__(self, user_id: str, lines: Optional[List[CartLine]] = None, lock=None):
        self.user_id = user_id
        self._lines: List[CartLine] = list(lines or [])
        self._lock = lock or threading.RLock()

    @property
    def lines(self) -> List[CartLine]:
        with self._lock:
            return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        with self._lock:
            return sum(line.quantity for line in self._lines)

    @property
    def savings(self) -> Decimal:
        with self._lock:
            return sum((line.savings for line in self._lines), Decimal(0))

    def totals(self, policy: PricingPolicy = DEFAULT_POLICY) -> Totals:
        with self._lock:
            return compute_totals(self._lines, policy)

    def _find(self, product_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.product.id == product_id:
                return line
        return None

    def quantity_of(self, product_id: str) -> int:
        with self._lock:
            line = self._find(product_id)
            return line.quantity if line else 0

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        with self._lock:
            line = self._find(product.id)
            if line:
                line.quantity += quantity
            else:
                line = CartLine(product=product, quantity=quantity)
                self._lines.append(line)
            self._changed()
            return line

    def remove(self, product_id: str) -> bool:
        with self._lock:
            before = len(self._lines)
            self._lines = [line for line in self._lines if line.product.id != product_id]
            removed = len(self._lines) != before
            if removed:
                self._changed()
            return removed

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        """Set a line's quantity; zero or less removes the line."""
        with self._lock:
            line = self._find(product_id)
            if not line:
                return False
            if quantity <= 0:
                return self.remove(product_id)
            line.quantity = quantity
            self._changed()
            return True

    def increase(self, product_id: str) -> bool:
        with self._lock:
            line = self._find(product_id)
            if not line:
                return False
            line.quantity += 1
            self._changed()
            return True

    def decrease(self, product_id: str) -> bool:
        with self._lock:
            line = self._find(product_id)
            if not line:
                return False
            if line.quantity > 1:
                line.quantity -= 1
                self._changed()
                return True
            return self.remove(product_id)

    def clear(self) -> None:
        with self._lock:
            self._lines = []
            self._changed()

    def snapshot(self) -> List[CartLine]:
        """Independent copies of the current lines."""
        with self._lock:
            return [line.model_copy(deep=True) for line in self._lines]

    def to_document(self):
        with self._lock:
            return [line.model_dump(mode="json") for line in self._lines]

    @classmethod
    def from_document(cls, user_id: str, raw, lock=None) -> "Cart":
        lines = [CartLine.model_validate(item) for item in raw or []]
        return cls(user_id, lines, lock=lock)

    def _changed(self) -> None:
        events.cart_changed.send(self, user_id=self.user_id)
