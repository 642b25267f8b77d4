from flask import request, jsonify, g
from extensions import get_storefront
from app.schemas.wishlist import WishlistItemRequest
from app.utils import not_found, validate_schema
from . import store_bp, with_warning


def _payload(wishlist, **extra):
    return with_warning(get_storefront(), {
        "status": "success",
        "wishlist": [p.to_dict() for p in wishlist.items],
        "count": len(wishlist),
        **extra,
    })


@store_bp.route("/wishlist", methods=["GET"])
def view_wishlist():
    return jsonify(_payload(get_storefront().wishlist_for(g.user_id))), 200


@store_bp.route("/wishlist/toggle", methods=["POST"])
@validate_schema(WishlistItemRequest)
def toggle_wishlist():
    storefront = get_storefront()
    product_id = request.validated_data.product_id
    wishlisted = storefront.toggle_wishlist(g.user_id, product_id)
    if wishlisted is None:
        return not_found("Product")
    wishlist = storefront.wishlist_for(g.user_id)
    return jsonify(_payload(wishlist, product_id=product_id, wishlisted=wishlisted)), 200


@store_bp.route("/wishlist/remove", methods=["POST"])
@validate_schema(WishlistItemRequest)
def remove_from_wishlist():
    wishlist = get_storefront().wishlist_for(g.user_id)
    if not wishlist.remove(request.validated_data.product_id):
        return not_found("Product in wishlist")
    return jsonify(_payload(wishlist)), 200


@store_bp.route("/wishlist/clear", methods=["POST"])
def clear_wishlist():
    wishlist = get_storefront().wishlist_for(g.user_id)
    wishlist.clear()
    return jsonify(_payload(wishlist)), 200
