from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.cart import CartLine
from models.user import Address, is_guest_id


class OrderStatus(str, Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    PACKED = "packed"
    ON_THE_WAY = "on_the_way"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY[self]

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


_STATUS_DISPLAY = {
    OrderStatus.PLACED: "Order Placed",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PACKED: "Packed",
    OrderStatus.ON_THE_WAY: "On the Way",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "upi"
    CASH = "cash"

    @property
    def display_name(self) -> str:
        return {
            PaymentMethod.CARD: "Credit/Debit Card",
            PaymentMethod.UPI: "UPI",
            PaymentMethod.CASH: "Cash on Delivery",
        }[self]


class Order(BaseModel):
    """Placed order.

    Everything except ``status`` and ``actual_delivery_time`` is fixed at
    checkout; those two are written by the lifecycle driver or a cancel.
    """

    id: str
    user_id: str
    items: List[CartLine]
    total_amount: Decimal
    delivery_fee: Decimal
    discount: Decimal = Decimal(0)
    final_amount: Decimal
    status: OrderStatus = OrderStatus.PLACED
    delivery_address: Address
    order_date: datetime
    estimated_delivery_time: datetime
    actual_delivery_time: Optional[datetime] = None
    payment_method: PaymentMethod = PaymentMethod.CARD
    notes: Optional[str] = None

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    def to_dict(self):
        return {
            "order_id": self.id,
            "user_id": self.user_id,
            "guest": is_guest_id(self.user_id),
            "items": [line.to_dict() for line in self.items],
            "item_count": self.item_count,
            "total_amount": float(self.total_amount),
            "delivery_fee": float(self.delivery_fee),
            "discount": float(self.discount),
            "final_amount": float(self.final_amount),
            "status": self.status.value,
            "status_display": self.status.display_name,
            "delivery_address": self.delivery_address.to_dict(),
            "order_date": self.order_date.isoformat(),
            "estimated_delivery_time": self.estimated_delivery_time.isoformat(),
            "actual_delivery_time": (
                self.actual_delivery_time.isoformat() if self.actual_delivery_time else None
            ),
            "payment_method": self.payment_method.value,
            "payment_method_display": self.payment_method.display_name,
            "notes": self.notes,
        }
