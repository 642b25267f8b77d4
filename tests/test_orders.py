import re
from datetime import timedelta
from decimal import Decimal

import pytest

from app.services import events
from app.services.errors import OrderClosedError
from app.services.lifecycle import LIFECYCLE, OrderTracker, next_status
from app.services.orders import OrderService
from models.cart import CartLine
from models.order import OrderStatus, PaymentMethod
from conftest import T0, make_address, make_product


@pytest.fixture()
def service(scheduler):
    svc = OrderService(scheduler)
    yield svc
    svc.tracker.stop_all()


def place(service, user_id="u1", price="100", quantity=2, **kwargs):
    lines = [CartLine(product=make_product("a", price), quantity=quantity)]
    return service.place_order(user_id, lines, make_address(), **kwargs)


def test_next_status_chain():
    assert [next_status(s) for s in LIFECYCLE] == [
        OrderStatus.CONFIRMED,
        OrderStatus.PACKED,
        OrderStatus.ON_THE_WAY,
        OrderStatus.DELIVERED,
        None,
    ]
    assert next_status(OrderStatus.CANCELLED) is None


def test_place_order_fixes_amounts(service):
    order = place(service, price="100", quantity=2)
    assert order.total_amount == Decimal(200)
    assert order.delivery_fee == Decimal(40)
    assert order.discount == Decimal(0)
    assert order.final_amount == Decimal(240)
    assert order.status is OrderStatus.PLACED
    assert order.item_count == 2


def test_large_order_ships_free(service):
    order = place(service, price="300", quantity=2)
    assert order.delivery_fee == Decimal(0)
    assert order.final_amount == Decimal(600)


def test_order_id_and_delivery_estimate(service):
    order = place(service, payment_method=PaymentMethod.UPI, notes="Ring twice")
    assert re.fullmatch(r"ORD[0-9A-F]{10}", order.id)
    assert order.order_date == T0
    assert order.estimated_delivery_time - order.order_date == timedelta(hours=1)
    assert order.payment_method is PaymentMethod.UPI
    assert order.notes == "Ring twice"


def test_order_keeps_its_own_copy_of_lines(service):
    lines = [CartLine(product=make_product("a"), quantity=1)]
    order = service.place_order("u1", lines, make_address())
    lines[0].quantity = 7
    assert order.items[0].quantity == 1


def test_history_is_most_recent_first(service, scheduler):
    first = place(service)
    scheduler.advance(5)
    second = place(service, user_id="u2")
    assert [o.id for o in service.history()] == [second.id, first.id]
    assert [o.id for o in service.history("u1")] == [first.id]


def test_lifecycle_runs_to_delivery(service, scheduler):
    order = place(service)
    seen = []
    for _ in range(4):
        scheduler.advance(30)
        seen.append(order.status)
    assert seen == [
        OrderStatus.CONFIRMED,
        OrderStatus.PACKED,
        OrderStatus.ON_THE_WAY,
        OrderStatus.DELIVERED,
    ]
    assert order.actual_delivery_time == T0 + timedelta(seconds=120)
    assert not service.tracker.is_tracking(order.id)
    assert scheduler.pending == 0
    scheduler.advance(600)
    assert order.status is OrderStatus.DELIVERED


def test_status_changes_are_published(service, scheduler):
    seen = []

    def receiver(sender, order, previous, **kwargs):
        seen.append((previous, order.status))

    events.order_status_changed.connect(receiver, sender=service)
    try:
        place(service)
        scheduler.advance(60)
    finally:
        events.order_status_changed.disconnect(receiver, sender=service)
    assert seen == [
        (OrderStatus.PLACED, OrderStatus.CONFIRMED),
        (OrderStatus.CONFIRMED, OrderStatus.PACKED),
    ]


def test_cancel_active_order_stops_tracking(service, scheduler):
    order = place(service)
    scheduler.advance(30)
    assert service.cancel(order.id) is order
    assert order.status is OrderStatus.CANCELLED
    scheduler.advance(300)
    assert order.status is OrderStatus.CANCELLED
    assert order.actual_delivery_time is None


def test_cancel_twice_is_a_no_op(service):
    order = place(service)
    service.cancel(order.id)
    assert service.cancel(order.id).status is OrderStatus.CANCELLED


def test_cancel_unknown_order(service):
    assert service.cancel("ORDMISSING00") is None


def test_cancel_delivered_is_rejected(service, scheduler):
    order = place(service)
    scheduler.advance(120)
    with pytest.raises(OrderClosedError):
        service.cancel(order.id)
    assert order.status is OrderStatus.DELIVERED


def test_cancel_delivered_when_allowed(scheduler):
    service = OrderService(scheduler, allow_cancel_delivered=True)
    order = place(service)
    scheduler.advance(120)
    service.cancel(order.id)
    assert order.status is OrderStatus.CANCELLED


def test_tracker_never_runs_two_timers_for_one_order(service, scheduler):
    order = place(service)
    service.tracker.track(order)
    assert scheduler.pending == 1
    scheduler.advance(30)
    assert order.status is OrderStatus.CONFIRMED


def test_tracker_ignores_terminal_orders(scheduler, service):
    order = place(service)
    service.cancel(order.id)
    tracker = OrderTracker(scheduler)
    assert tracker.track(order) is None
    assert not tracker.is_tracking(order.id)


def test_summary_and_tracking(service, scheduler):
    delivered = place(service)
    scheduler.advance(120)
    active = place(service)
    cancelled = place(service)
    service.cancel(cancelled.id)
    scheduler.advance(30)
    assert service.summary("u1") == {"total": 3, "delivered": 1, "active": 1, "cancelled": 1}

    tracking = service.tracking(active)
    assert tracking["status"] == "confirmed"
    assert tracking["current_step"] == 1
    assert [s["reached"] for s in tracking["steps"]] == [True, True, False, False, False]
    assert tracking["is_tracking"] is True
    assert service.tracking(delivered)["actual_delivery_time"] is not None
    assert not any(s["reached"] for s in service.tracking(cancelled)["steps"])


def test_load_replaces_history_without_tracking(service, scheduler):
    order = place(service)
    copy = order.model_copy(deep=True)
    service.load([copy])
    assert service.get(order.id) is copy
    scheduler.advance(300)
    assert copy.status is OrderStatus.PLACED
