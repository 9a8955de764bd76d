# Overview: Service-layer operations for restock purchases and miscellaneous costs.

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from ..extensions import db
from ..models import ExpenseRecord
from ..validation import ValidationError, MAX_MONEY_CENTS
from eventpos.time_utils import utcnow, event_day
from .catalog_service import require_product
from .inventory_service import increment
from .concurrency import run_in_transaction

MISC_EXPENSE_LABEL = "Ice/Misc"


def register_purchase(
    product_id: int | None,
    label: str,
    quantity: int,
    total_cost_cents: int,
    recorded_at: datetime | None = None,
) -> ExpenseRecord:
    """
    Single server-side step behind both restock and misc expenses.

    Appends the expense and, when a product is given, raises its stock by
    `quantity` in the same transaction, so two restocks racing cannot lose
    an increment between a read and a write.
    """
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")
    if total_cost_cents <= 0:
        raise ValidationError("total_cost must be > 0")
    if total_cost_cents > MAX_MONEY_CENTS:
        raise ValidationError(f"total_cost cannot exceed {MAX_MONEY_CENTS}")
    label = (label or "").strip()
    if not label:
        raise ValidationError("label cannot be blank")

    def _op():
        if product_id is not None:
            require_product(product_id)

        expense = ExpenseRecord(
            product_id=product_id,
            label=label[:120],
            quantity=quantity,
            total_cost_cents=total_cost_cents,
            recorded_at=recorded_at or utcnow(),
        )
        db.session.add(expense)
        db.session.flush()

        if product_id is not None:
            increment(product_id, quantity, commit=False)
        return expense

    return run_in_transaction(_op)


def record_restock(
    product_id: int,
    label: str,
    quantity: int,
    total_cost_cents: int,
    recorded_at: datetime | None = None,
) -> ExpenseRecord:
    """Bought more of a product: book the cost and add the units to stock."""
    if product_id is None:
        raise ValidationError("product_id is required for a restock")
    return register_purchase(product_id, label, quantity, total_cost_cents, recorded_at)


def record_misc(
    label: str | None,
    total_cost_cents: int,
    recorded_at: datetime | None = None,
) -> ExpenseRecord:
    """A cost with no product attached (ice, cups, ...). Quantity is always 1."""
    label = (label or "").strip() or MISC_EXPENSE_LABEL
    return register_purchase(None, label, 1, total_cost_cents, recorded_at)


def list_expenses(*, day: date | None = None, tz_name: str = "UTC") -> list[ExpenseRecord]:
    rows = db.session.query(ExpenseRecord).order_by(
        ExpenseRecord.recorded_at.desc(), ExpenseRecord.id.desc()
    ).all()
    if day is not None:
        rows = [r for r in rows if event_day(r.recorded_at, tz_name) == day]
    return rows


def expenses_total(expenses: Iterable) -> int:
    return sum(e.total_cost_cents or 0 for e in expenses)
