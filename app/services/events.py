"""Named signals published by the storefront state containers.

Receivers are called synchronously on the publishing thread, which for order
status changes is the scheduler's worker (always under the scheduler lock).
"""
from blinker import Namespace

storefront_signals = Namespace()

# sender: Cart; kwargs: user_id
cart_changed = storefront_signals.signal("cart-changed")

# sender: Wishlist; kwargs: user_id
wishlist_changed = storefront_signals.signal("wishlist-changed")

# sender: OrderService; kwargs: order
order_placed = storefront_signals.signal("order-placed")

# sender: OrderService; kwargs: order, previous
order_status_changed = storefront_signals.signal("order-status-changed")

# sender: Storefront; kwargs: key, message
storage_failed = storefront_signals.signal("storage-failed")
