from flask import request, jsonify, g
from extensions import get_storefront
from app.schemas.cart import AddToCartRequest, UpdateCartRequest, CartItemRequest
from app.services.errors import ValidationError
from app.services.pricing import amount_to_free_delivery
from app.utils import error, not_found, validate_schema
from . import store_bp, with_warning


def cart_payload(storefront, cart):
    totals = cart.totals(storefront.policy)
    return with_warning(storefront, {
        "status": "success",
        "cart": [line.to_dict() for line in cart.lines],
        "item_count": cart.item_count,
        **totals.to_dict(),
        "total_savings": float(cart.savings),
        "free_delivery_threshold": float(storefront.policy.free_delivery_threshold),
        "amount_to_free_delivery": float(amount_to_free_delivery(totals.subtotal, storefront.policy)),
    })


@store_bp.route("/cart", methods=["GET"])
def view_cart():
    storefront = get_storefront()
    return jsonify(cart_payload(storefront, storefront.cart_for(g.user_id))), 200


@store_bp.route("/cart/add", methods=["POST"])
@validate_schema(AddToCartRequest)
def add_to_cart():
    data = request.validated_data
    storefront = get_storefront()
    try:
        line = storefront.add_to_cart(g.user_id, data.product_id, data.quantity)
    except ValidationError as e:
        return error(str(e), status=400)
    if line is None:
        return not_found("Product")
    return jsonify(cart_payload(storefront, storefront.cart_for(g.user_id))), 200


@store_bp.route("/cart/update", methods=["POST"])
@validate_schema(UpdateCartRequest)
def update_cart_quantity():
    data = request.validated_data
    storefront = get_storefront()
    cart = storefront.cart_for(g.user_id)
    if not cart.update_quantity(data.product_id, data.quantity):
        return not_found("Item in cart")
    return jsonify(cart_payload(storefront, cart)), 200


@store_bp.route("/cart/increase", methods=["POST"])
@validate_schema(CartItemRequest)
def increase_quantity():
    storefront = get_storefront()
    cart = storefront.cart_for(g.user_id)
    if not cart.increase(request.validated_data.product_id):
        return not_found("Item in cart")
    return jsonify(cart_payload(storefront, cart)), 200


@store_bp.route("/cart/decrease", methods=["POST"])
@validate_schema(CartItemRequest)
def decrease_quantity():
    storefront = get_storefront()
    cart = storefront.cart_for(g.user_id)
    if not cart.decrease(request.validated_data.product_id):
        return not_found("Item in cart")
    return jsonify(cart_payload(storefront, cart)), 200


@store_bp.route("/cart/remove", methods=["POST"])
@validate_schema(CartItemRequest)
def remove_item():
    storefront = get_storefront()
    cart = storefront.cart_for(g.user_id)
    if not cart.remove(request.validated_data.product_id):
        return not_found("Item in cart")
    return jsonify(cart_payload(storefront, cart)), 200


@store_bp.route("/cart/clear", methods=["POST"])
def clear_cart():
    storefront = get_storefront()
    cart = storefront.cart_for(g.user_id)
    cart.clear()
    return jsonify(cart_payload(storefront, cart)), 200
