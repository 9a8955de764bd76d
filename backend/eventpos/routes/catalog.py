# Overview: Flask API routes for products and bundle promotions; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..models import Product, Promotion
from ..services import catalog_service, pricing_service, state_service
from ..services.concurrency import PersistenceError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
    UnknownProductError,
    enforce_rules_product,
    enforce_rules_promotion,
    require_non_negative_int,
)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")

PRODUCT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "category", "unit_cost_cents", "suggested_price_cents", "units_per_pack"},
    required_on_create={"name", "suggested_price_cents"},
)

PROMOTION_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"product_id", "trigger_quantity", "bundle_price_cents"},
    required_on_create={"product_id", "trigger_quantity", "bundle_price_cents"},
)


@catalog_bp.get("/products")
def list_products_route():
    """Products with their promotion schedule and 'starts at' label."""
    state = state_service.load_pricing_state()
    products = []
    for product in state.products:
        row = product.to_dict()
        row["has_promotion"] = pricing_service.has_promotion(state, product.id)
        row["promotion_label"] = pricing_service.best_promotion_label(state, product.id)
        row["promotions"] = [p.to_dict() for p in pricing_service.promotion_schedule(state, product.id)]
        products.append(row)
    return jsonify({"products": products}), 200


@catalog_bp.post("/products")
def create_product_route():
    payload = request.get_json(silent=True) or {}
    initial_quantity = payload.pop("initial_quantity", 0) if isinstance(payload, dict) else 0

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_CREATE_POLICY)
        patch["initial_quantity"] = require_non_negative_int("initial_quantity", initial_quantity)
        enforce_rules_product(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        product = catalog_service.create_product(**patch)
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except PersistenceError:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Storage unavailable"}), 503

    return jsonify({"product": product.to_dict()}), 201


@catalog_bp.get("/promotions")
def list_promotions_route():
    product_id = request.args.get("product_id", type=int)
    promotions = catalog_service.list_promotions(product_id)
    return jsonify({"promotions": [p.to_dict() for p in promotions]}), 200


@catalog_bp.post("/promotions")
def create_promotion_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Promotion, payload=payload, policy=PROMOTION_CREATE_POLICY)
        enforce_rules_promotion(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        promo = catalog_service.create_promotion(
            patch["product_id"], patch["trigger_quantity"], patch["bundle_price_cents"]
        )
    except UnknownProductError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except PersistenceError:
        current_app.logger.exception("Failed to create promotion")
        return jsonify({"error": "Storage unavailable"}), 503

    return jsonify({"promotion": promo.to_dict()}), 201


@catalog_bp.delete("/promotions/<int:promo_id>")
def delete_promotion_route(promo_id: int):
    try:
        deleted = catalog_service.delete_promotion(promo_id)
    except PersistenceError:
        current_app.logger.exception("Failed to delete promotion")
        return jsonify({"error": "Storage unavailable"}), 503
    if not deleted:
        return jsonify({"error": "Not found"}), 404
    return jsonify({"deleted": promo_id}), 200
