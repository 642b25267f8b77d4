from flask import request, jsonify, g
from extensions import get_storefront
from app.schemas.orders import AddressRequest
from app.schemas.profile import AddressIdRequest, UpdateProfileRequest
from app.utils import not_found, validate_schema
from models.user import Address
from . import store_bp, with_warning


def _profile_payload(storefront, user, **extra):
    data = user.to_dict()
    data["wishlist"] = [p.id for p in storefront.wishlist_for(user.id).items]
    return with_warning(storefront, {"status": "success", "profile": data, **extra})


def _addresses_payload(storefront, user, **extra):
    return with_warning(storefront, {
        "status": "success",
        "addresses": [a.to_dict() for a in user.addresses],
        **extra,
    })


@store_bp.route("/profile", methods=["GET"])
def view_profile():
    storefront = get_storefront()
    return jsonify(_profile_payload(storefront, storefront.profile_for(g.user_id))), 200


@store_bp.route("/profile", methods=["PUT"])
@validate_schema(UpdateProfileRequest)
def update_profile():
    storefront = get_storefront()
    user = storefront.update_profile(g.user_id, **request.validated_data.model_dump())
    return jsonify(_profile_payload(storefront, user, message="Profile updated")), 200


@store_bp.route("/profile/addresses", methods=["GET"])
def list_addresses():
    storefront = get_storefront()
    return jsonify(_addresses_payload(storefront, storefront.profile_for(g.user_id))), 200


@store_bp.route("/profile/addresses", methods=["POST"])
@validate_schema(AddressRequest)
def add_address():
    storefront = get_storefront()
    address = storefront.add_address(g.user_id, Address(**request.validated_data.model_dump()))
    user = storefront.profile_for(g.user_id)
    return jsonify(_addresses_payload(storefront, user, address=address.to_dict())), 201


@store_bp.route("/profile/addresses/default", methods=["POST"])
@validate_schema(AddressIdRequest)
def set_default_address():
    storefront = get_storefront()
    if storefront.set_default_address(g.user_id, request.validated_data.address_id) is None:
        return not_found("Address")
    return jsonify(_addresses_payload(storefront, storefront.profile_for(g.user_id))), 200


@store_bp.route("/profile/addresses/<address_id>", methods=["DELETE"])
def remove_address(address_id):
    storefront = get_storefront()
    if storefront.remove_address(g.user_id, address_id) is None:
        return not_found("Address")
    return jsonify(_addresses_payload(storefront, storefront.profile_for(g.user_id))), 200
