# Overview: Flask API routes for cart pricing and sale commits; parses input and returns JSON responses.

# backend/eventpos/routes/sales.py
"""
Sales API routes.

POST /api/pricing/quote  - price a cart without writing anything
POST /api/sales          - commit a cart (all lines or none)
GET  /api/sales          - today's sales, newest first
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import sales_service, pricing_service, state_service
from ..services.concurrency import PersistenceError
from ..services.projection_service import EventSettings
from ..services.sales_service import SaleError
from ..validation import ValidationError, coerce_int, require_positive_int, require_non_negative_int
from eventpos.time_utils import utcnow, event_day, parse_iso_datetime


sales_bp = Blueprint("sales", __name__, url_prefix="/api")


def _parse_lines(payload) -> list[tuple[int, int]]:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    raw_lines = payload.get("lines")
    if not isinstance(raw_lines, list) or not raw_lines:
        raise ValidationError("lines must be a non-empty list")

    lines = []
    for raw in raw_lines:
        if not isinstance(raw, dict):
            raise ValidationError("each line must be an object")
        if "product_id" not in raw or "quantity" not in raw:
            raise ValidationError("product_id and quantity required")
        lines.append((
            coerce_int("product_id", raw["product_id"]),
            require_positive_int("quantity", raw["quantity"]),
        ))
    return lines


@sales_bp.post("/pricing/quote")
def quote_route():
    """Preview cart total with bundle pricing. Unknown products price at 0."""
    try:
        lines = _parse_lines(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    state = state_service.load_pricing_state()
    return jsonify(pricing_service.quote(state, lines)), 200


@sales_bp.post("/sales")
def commit_sale_route():
    """
    Commit a cart.

    Not idempotent: a client must not blindly retry a request whose
    response it never saw.
    """
    try:
        lines = _parse_lines(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        receipt = sales_service.commit_sale(lines)
    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except PersistenceError:
        current_app.logger.exception("Failed to commit sale")
        return jsonify({"error": "Could not record the sale"}), 503
    except Exception:
        current_app.logger.exception("Failed to commit sale")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info(
        "Sale committed: %d lines, total_cents=%d", len(receipt.records), receipt.total_cents
    )
    return jsonify(receipt.to_dict()), 201


@sales_bp.get("/sales")
def list_sales_route():
    """
    Sales of one event day, newest first.

    ?as_of=<ISO-8601> picks the day containing that instant (default: now).
    ?limit=<n> caps the number of rows.
    """
    settings = EventSettings.from_config(current_app.config)
    try:
        as_of = parse_iso_datetime(request.args.get("as_of")) or utcnow()
    except ValueError:
        return jsonify({"error": "as_of must be an ISO-8601 datetime"}), 400

    limit = None
    if request.args.get("limit") is not None:
        try:
            limit = require_non_negative_int("limit", request.args["limit"])
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

    day = event_day(as_of, settings.timezone)
    rows = sales_service.list_sales(day=day, tz_name=settings.timezone, limit=limit)
    return jsonify({"sales": [r.to_dict() for r in rows]}), 200
