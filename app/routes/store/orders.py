from flask import request, jsonify, g, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter, get_storefront
from app.schemas.orders import PlaceOrderRequest
from app.services.errors import OrderClosedError, ValidationError
from app.telemetry import tracer
from app.utils import error, not_found, validate_schema
from models.user import Address
from . import store_bp, with_warning


def _own_order(storefront, order_id):
    order = storefront.orders.get(order_id)
    if order is None or order.user_id != g.user_id:
        return None
    return order


@store_bp.route("/orders", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@validate_schema(PlaceOrderRequest)
def place_order():
    data = request.validated_data
    storefront = get_storefront()
    if data.delivery_address is not None:
        address = Address(**data.delivery_address.model_dump())
    else:
        address = storefront.profile_for(g.user_id).find_address(data.address_id)
        if address is None:
            return not_found("Address")
    with tracer().start_as_current_span("storefront.checkout") as span:
        span.set_attribute("payment_method", data.payment_method.value)
        try:
            order = storefront.checkout(g.user_id, address, data.payment_method, data.notes)
        except ValidationError as e:
            return error(str(e), status=400)
        span.set_attribute("order_id", order.id)
    payload = {
        "status": "success",
        "message": "Order placed successfully",
        "order_id": order.id,
        "order": order.to_dict(),
    }
    return jsonify(with_warning(storefront, payload)), 201


@store_bp.route("/orders", methods=["GET"])
def order_history():
    orders = get_storefront().orders.history(g.user_id)
    return jsonify({"status": "success", "orders": [o.to_dict() for o in orders]}), 200


@store_bp.route("/orders/summary", methods=["GET"])
def order_summary():
    return jsonify({"status": "success", **get_storefront().orders.summary(g.user_id)}), 200


@store_bp.route("/orders/<order_id>", methods=["GET"])
def order_detail(order_id):
    order = _own_order(get_storefront(), order_id)
    if order is None:
        return not_found("Order")
    return jsonify({"status": "success", "order": order.to_dict()}), 200


@store_bp.route("/orders/<order_id>/tracking", methods=["GET"])
def order_tracking(order_id):
    storefront = get_storefront()
    order = _own_order(storefront, order_id)
    if order is None:
        return not_found("Order")
    return jsonify({"status": "success", **storefront.orders.tracking(order)}), 200


@store_bp.route("/orders/<order_id>/cancel", methods=["POST"])
def cancel_order(order_id):
    storefront = get_storefront()
    if _own_order(storefront, order_id) is None:
        return not_found("Order")
    try:
        order = storefront.orders.cancel(order_id)
    except OrderClosedError as e:
        return error(str(e), status=409)
    payload = {"status": "success", "message": "Order cancelled", "order": order.to_dict()}
    return jsonify(with_warning(storefront, payload)), 200
