# Overview: Flask API routes for the expense ledger (restock purchases and misc costs).

from flask import Blueprint, request, jsonify, current_app

from ..commands import Command, RESTOCK, MISC_EXPENSE, execute_command
from ..services import expense_service
from ..services.concurrency import PersistenceError
from ..services.projection_service import EventSettings
from ..validation import ValidationError, UnknownProductError
from eventpos.time_utils import utcnow, event_day


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


def _run(command: Command):
    try:
        expense = execute_command(command)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except UnknownProductError as e:
        return jsonify({"error": str(e)}), 404
    except PersistenceError:
        current_app.logger.exception("Failed to record expense")
        return jsonify({"error": "Storage unavailable"}), 503

    current_app.logger.info(
        "Expense recorded: %s qty=%d cost_cents=%d product_id=%s",
        expense.label, expense.quantity, expense.total_cost_cents, expense.product_id,
    )
    return jsonify({"expense": expense.to_dict()}), 201


@expenses_bp.get("")
def list_expenses_route():
    settings = EventSettings.from_config(current_app.config)
    today = event_day(utcnow(), settings.timezone)
    rows = expense_service.list_expenses(day=today, tz_name=settings.timezone)
    return jsonify({
        "expenses": [r.to_dict() for r in rows],
        "total_cents": expense_service.expenses_total(rows),
    }), 200


@expenses_bp.post("/restock")
def restock_route():
    """
    Bought more stock: book the cost and add the units in one step.

    Body: {"product_id": 1, "quantity": "24", "total_cost": "89,90", "label": optional}
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    return _run(Command(RESTOCK, payload))


@expenses_bp.post("/misc")
def misc_expense_route():
    """Body: {"total_cost": "30,00", "label": optional}"""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    return _run(Command(MISC_EXPENSE, payload))
