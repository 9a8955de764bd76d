# backend/eventpos/routes/inventory.py
"""
Inventory routes.

Stock only moves through sales and restocks; the one direct write exposed
here is the manual correction used to match a physical count.
"""
from flask import Blueprint, request, jsonify, current_app

from ..commands import Command, CORRECTION, execute_command
from ..services import inventory_service, state_service
from ..services.concurrency import PersistenceError
from ..validation import ValidationError, UnknownProductError


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("")
def list_inventory_route():
    state = state_service.load_state()
    return jsonify({
        "inventory": [r.to_dict() for r in state.inventory],
        "summary": inventory_service.inventory_summary(state),
    }), 200


@inventory_bp.post("/<int:product_id>/correct")
def correct_inventory_route(product_id: int):
    """
    Overwrite current and initial quantities.

    Body: {"current_quantity": n, "initial_total_quantity": m}
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    command = Command(CORRECTION, {
        "product_id": product_id,
        "current_quantity": payload.get("current_quantity"),
        "initial_total_quantity": payload.get("initial_total_quantity"),
    })

    try:
        record = execute_command(command)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except UnknownProductError as e:
        return jsonify({"error": str(e)}), 404
    except PersistenceError:
        current_app.logger.exception("Failed to correct inventory")
        return jsonify({"error": "Storage unavailable"}), 503

    current_app.logger.info(
        "Inventory corrected: product_id=%d current=%d initial=%d",
        record.product_id, record.current_quantity, record.initial_total_quantity,
    )
    return jsonify({"inventory": record.to_dict()}), 200
