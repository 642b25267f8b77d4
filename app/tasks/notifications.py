import logging
from functools import partial

from celery import shared_task

from app.services import events

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed by the store.",
    "packed": "Your order is packed and ready for pickup.",
    "on_the_way": "Your order is on the way!",
    "delivered": "Your order has been delivered. Enjoy!",
    "cancelled": "Your order has been cancelled.",
}


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_order_status_task(self, user_id: str, order_id: str, status: str) -> str:
    """Log the customer notification for an order status change."""
    message = STATUS_MESSAGES.get(status, f"Order status: {status}")
    logger.info("[push disabled] notify %s about %s: %s", user_id, order_id, message)
    return message


def queue_status_notification(user_id: str, order_id: str, status: str) -> None:
    try:
        notify_order_status_task.delay(user_id, order_id, status)
    except Exception as e:
        # Broker trouble must not stop the lifecycle driver.
        logger.error("Could not queue notification for %s: %s", order_id, e)


def _dispatch_status_notification(sender, order, **kwargs):
    # Publish outside the order lock; capture the status now.
    sender.defer(partial(queue_status_notification, order.user_id, order.id, order.status.value))


def init_app(app, storefront):
    if app.config.get("NOTIFICATIONS_ENABLED", True):
        events.order_status_changed.connect(_dispatch_status_notification, sender=storefront.orders)
