"""
Operator commands: restock, miscellaneous expense, inventory correction.

Whatever collects the values (a phone prompt, a form, the CLI) hands over a
`Command(kind, fields)` with the raw strings the operator typed.
`validate_command` is pure and rejects bad input before anything is
written; `execute_command` validates and then calls the ledger services.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .money import parse_money_to_cents
from .validation import (
    ValidationError,
    coerce_int,
    require_positive_int,
    require_non_negative_int,
    check_money_cents,
)

RESTOCK = "restock"
MISC_EXPENSE = "misc_expense"
CORRECTION = "correction"

COMMAND_KINDS = (RESTOCK, MISC_EXPENSE, CORRECTION)


@dataclass(frozen=True)
class Command:
    kind: str
    fields: dict[str, Any] = field(default_factory=dict)


def _required(fields: dict, key: str):
    value = fields.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    return value


def _money(fields: dict, key: str) -> int:
    raw = _required(fields, key)
    try:
        cents = parse_money_to_cents(raw)
    except ValueError:
        raise ValidationError(f"{key} must be a number")
    return check_money_cents(key, cents, allow_zero=False)


def _label(fields: dict) -> str | None:
    label = fields.get("label")
    if label is None:
        return None
    label = str(label).strip()
    if len(label) > 120:
        raise ValidationError("label exceeds max length 120")
    return label or None


def validate_command(command: Command) -> dict:
    """
    Normalize a command's raw fields.

    restock:      product_id, quantity (> 0), total_cost (> 0), label?
    misc_expense: total_cost (> 0), label?
    correction:   product_id, current_quantity (>= 0), initial_total_quantity (>= 0)

    Money may use "," or "." as decimal separator and comes back as
    `total_cost_cents`.
    """
    if command.kind not in COMMAND_KINDS:
        raise ValidationError(f"Unknown command: {command.kind}")
    fields = command.fields or {}

    if command.kind == RESTOCK:
        return {
            "product_id": coerce_int("product_id", _required(fields, "product_id")),
            "quantity": require_positive_int("quantity", _required(fields, "quantity")),
            "total_cost_cents": _money(fields, "total_cost"),
            "label": _label(fields),
        }

    if command.kind == MISC_EXPENSE:
        return {
            "total_cost_cents": _money(fields, "total_cost"),
            "label": _label(fields),
        }

    return {
        "product_id": coerce_int("product_id", _required(fields, "product_id")),
        "current_quantity": require_non_negative_int(
            "current_quantity", _required(fields, "current_quantity")
        ),
        "initial_total_quantity": require_non_negative_int(
            "initial_total_quantity", _required(fields, "initial_total_quantity")
        ),
    }


def execute_command(command: Command):
    """Validate, then apply. Returns the ExpenseRecord or InventoryRecord written."""
    from .services import expense_service, inventory_service
    from .services.catalog_service import require_product

    data = validate_command(command)

    if command.kind == RESTOCK:
        product = require_product(data["product_id"])
        return expense_service.record_restock(
            product.id,
            data["label"] or product.name,
            data["quantity"],
            data["total_cost_cents"],
        )

    if command.kind == MISC_EXPENSE:
        return expense_service.record_misc(data["label"], data["total_cost_cents"])

    require_product(data["product_id"])
    return inventory_service.correct(
        data["product_id"],
        data["current_quantity"],
        data["initial_total_quantity"],
    )
