import logging
import uuid
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from app.services import events
from app.services.errors import OrderClosedError
from app.services.lifecycle import DEFAULT_INTERVAL_SECONDS, LIFECYCLE, OrderTracker, step_index
from app.services.pricing import DEFAULT_POLICY, PricingPolicy, compute_totals
from app.services.scheduler import Scheduler
from models.cart import CartLine
from models.order import Order, OrderStatus, PaymentMethod
from models.user import Address

logger = logging.getLogger(__name__)

ESTIMATED_DELIVERY = timedelta(hours=1)

ACTIVE_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PACKED,
    OrderStatus.ON_THE_WAY,
)


def new_order_id() -> str:
    return f"ORD{uuid.uuid4().hex[:10].upper()}"


class OrderService:
    """Order history plus the lifecycle driver for each placed order.

    History is kept most recent first. All reads and writes happen under the
    scheduler lock so tick callbacks never interleave with a request.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        policy: PricingPolicy = DEFAULT_POLICY,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        estimated_delivery: timedelta = ESTIMATED_DELIVERY,
        allow_cancel_delivered: bool = False,
    ):
        self._scheduler = scheduler
        self.policy = policy
        self.estimated_delivery = estimated_delivery
        self.allow_cancel_delivered = allow_cancel_delivered
        self.tracker = OrderTracker(scheduler, interval, on_transition=self._status_changed)
        self._orders: List[Order] = []

    @property
    def lock(self):
        return self._scheduler.lock

    def defer(self, fn) -> None:
        self._scheduler.defer(fn)

    @property
    def orders(self) -> List[Order]:
        with self.lock:
            return list(self._orders)

    def place_order(
        self,
        user_id: str,
        lines: Iterable[CartLine],
        address: Address,
        payment_method: PaymentMethod = PaymentMethod.CARD,
        notes: Optional[str] = None,
    ) -> Order:
        items = [line.model_copy(deep=True) for line in lines]
        totals = compute_totals(items, self.policy)
        discount = Decimal(0)
        with self._scheduler.critical():
            now = self._scheduler.now()
            order = Order(
                id=new_order_id(),
                user_id=user_id,
                items=items,
                total_amount=totals.subtotal,
                delivery_fee=totals.delivery_fee,
                discount=discount,
                final_amount=totals.subtotal + totals.delivery_fee - discount,
                status=OrderStatus.PLACED,
                delivery_address=address.model_copy(deep=True),
                order_date=now,
                estimated_delivery_time=now + self.estimated_delivery,
                payment_method=PaymentMethod(payment_method),
                notes=notes,
            )
            self._orders.insert(0, order)
            logger.info("Order %s placed by %s for %s", order.id, user_id, order.final_amount)
            events.order_placed.send(self, order=order)
            self.tracker.track(order)
        return order

    def cancel(self, order_id: str) -> Optional[Order]:
        with self._scheduler.critical():
            order = self._find(order_id)
            if order is None:
                return None
            if order.status is OrderStatus.CANCELLED:
                self.tracker.stop(order.id)
                return order
            if order.status is OrderStatus.DELIVERED and not self.allow_cancel_delivered:
                raise OrderClosedError("Order already delivered")
            previous = order.status
            order.status = OrderStatus.CANCELLED
            self.tracker.stop(order.id)
            logger.info("Order %s cancelled (was %s)", order.id, previous.value)
            self._status_changed(order, previous)
            return order

    def get(self, order_id: str) -> Optional[Order]:
        with self.lock:
            return self._find(order_id)

    def history(self, user_id: Optional[str] = None) -> List[Order]:
        with self.lock:
            if user_id is None:
                return list(self._orders)
            return [o for o in self._orders if o.user_id == user_id]

    def summary(self, user_id: Optional[str] = None):
        orders = self.history(user_id)
        return {
            "total": len(orders),
            "delivered": sum(1 for o in orders if o.status is OrderStatus.DELIVERED),
            "active": sum(1 for o in orders if o.status in ACTIVE_STATUSES),
            "cancelled": sum(1 for o in orders if o.status is OrderStatus.CANCELLED),
        }

    def tracking(self, order: Order):
        with self.lock:
            current = step_index(order.status)
            steps = [
                {
                    "status": status.value,
                    "label": status.display_name,
                    "reached": order.status is not OrderStatus.CANCELLED and index <= current,
                }
                for index, status in enumerate(LIFECYCLE)
            ]
            return {
                "order_id": order.id,
                "status": order.status.value,
                "status_display": order.status.display_name,
                "current_step": current,
                "steps": steps,
                "is_tracking": self.tracker.is_tracking(order.id),
                "estimated_delivery_time": order.estimated_delivery_time.isoformat(),
                "actual_delivery_time": (
                    order.actual_delivery_time.isoformat() if order.actual_delivery_time else None
                ),
            }

    def load(self, orders: List[Order]) -> None:
        """Replace history with previously saved orders (no tracking resumed)."""
        with self.lock:
            self.tracker.stop_all()
            self._orders = sorted(orders, key=lambda o: o.order_date, reverse=True)

    def to_document(self):
        with self.lock:
            return [o.model_dump(mode="json") for o in self._orders]

    def _find(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def _status_changed(self, order: Order, previous: OrderStatus) -> None:
        events.order_status_changed.send(self, order=order, previous=previous)
