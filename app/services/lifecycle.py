"""Simulated order progression.

An order moves ``placed -> confirmed -> packed -> on_the_way -> delivered``,
one step per tick. ``delivered`` and ``cancelled`` are terminal: no tick
changes them and the timer is stopped when one is reached.
"""
import logging
from typing import Callable, Dict, Optional

from app.services.scheduler import Scheduler, TimerHandle
from models.order import Order, OrderStatus

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30

LIFECYCLE = (
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PACKED,
    OrderStatus.ON_THE_WAY,
    OrderStatus.DELIVERED,
)

_NEXT = dict(zip(LIFECYCLE, LIFECYCLE[1:]))


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    return _NEXT.get(status)


def step_index(status: OrderStatus) -> int:
    try:
        return LIFECYCLE.index(status)
    except ValueError:
        return 0


class OrderTracker:
    """Owns at most one repeating timer per order."""

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        on_transition: Optional[Callable[[Order, OrderStatus], None]] = None,
    ):
        self._scheduler = scheduler
        self.interval = interval
        self._on_transition = on_transition
        self._handles: Dict[str, TimerHandle] = {}

    def track(self, order: Order) -> Optional[TimerHandle]:
        with self._scheduler.lock:
            self.stop(order.id)
            if order.status.is_terminal:
                return None

            def tick():
                self._tick(order, handle)

            handle = self._scheduler.call_every(self.interval, tick)
            self._handles[order.id] = handle
            return handle

    def stop(self, order_id: str) -> None:
        with self._scheduler.lock:
            handle = self._handles.pop(order_id, None)
            if handle:
                handle.cancel()

    def stop_all(self) -> None:
        with self._scheduler.lock:
            for order_id in list(self._handles):
                self.stop(order_id)

    def is_tracking(self, order_id: str) -> bool:
        return order_id in self._handles

    def _finish(self, order_id: str, handle: TimerHandle) -> None:
        handle.cancel()
        if self._handles.get(order_id) is handle:
            del self._handles[order_id]

    def _tick(self, order: Order, handle: TimerHandle) -> None:
        previous = order.status
        nxt = next_status(previous)
        if nxt is None:
            self._finish(order.id, handle)
            return
        order.status = nxt
        if nxt is OrderStatus.DELIVERED:
            order.actual_delivery_time = self._scheduler.now()
            self._finish(order.id, handle)
        logger.info("Order %s moved %s -> %s", order.id, previous.value, nxt.value)
        if self._on_transition:
            self._on_transition(order, previous)
