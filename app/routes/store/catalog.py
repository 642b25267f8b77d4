from flask import request, jsonify
from extensions import get_storefront
from app.services.catalog import search
from app.utils import not_found
from . import store_bp


@store_bp.route("/products", methods=["GET"])
def list_products():
    catalog = get_storefront().catalog
    category = request.args.get("category")
    products = catalog.by_category(category) if category else catalog.products
    products = search(products, request.args.get("q"))
    return jsonify({
        "status": "success",
        "count": len(products),
        "products": [p.to_dict() for p in products],
    }), 200


@store_bp.route("/products/featured", methods=["GET"])
def featured_products():
    limit = request.args.get("limit", default=6, type=int)
    products = get_storefront().catalog.featured(limit=max(limit, 0))
    return jsonify({"status": "success", "products": [p.to_dict() for p in products]}), 200


@store_bp.route("/products/<product_id>", methods=["GET"])
def product_detail(product_id):
    product = get_storefront().catalog.get(product_id)
    if product is None:
        return not_found("Product")
    return jsonify({"status": "success", "product": product.to_dict()}), 200


@store_bp.route("/categories", methods=["GET"])
def list_categories():
    catalog = get_storefront().catalog
    return jsonify({
        "status": "success",
        "categories": [
            {**c.to_dict(), "product_count": len(catalog.by_category(c.name))}
            for c in catalog.categories
        ],
    }), 200
