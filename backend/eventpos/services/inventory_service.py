# Overview: Service-layer operations for the stock counters; encapsulates business logic and database work.

# backend/eventpos/services/inventory_service.py

from sqlalchemy import update

from ..extensions import db
from ..models import InventoryRecord
from ..validation import ValidationError
from ..state import AppState
from .catalog_service import require_product
from .concurrency import run_in_transaction
"""
EventPOS Inventory Invariants (authoritative)

Inventory model:
- One InventoryRecord per product holding a stored, mutable current_quantity.
- It is NOT derived from the sales/expense history. A correction may set it
  to any non-negative value, including below what the ledger implies.

Write paths:
- decrement: sale commits only. Conditional on current_quantity >= by, so
  two terminals selling the last unit cannot both succeed.
- increment: restock purchases only. Raises current AND initial quantity,
  since a replenishment raises the baseline of the stock bar.
- correct: manual reconciliation against a physical count.

current_quantity >= 0 holds after every write (CHECK constraint backs it).
"""

LOW_STOCK_PCT = 25.0


class InventoryError(Exception):
    """Raised for stock operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class InsufficientStockError(InventoryError):
    """Conditional decrement matched no row."""


def current(product_id: int) -> int | None:
    """Current stock, or None when the product has no inventory record."""
    record = db.session.get(InventoryRecord, product_id)
    return record.current_quantity if record else None


def list_inventory() -> list[InventoryRecord]:
    return db.session.query(InventoryRecord).order_by(InventoryRecord.product_id.asc()).all()


def ensure_record(product_id: int, initial_quantity: int = 0) -> InventoryRecord:
    """
    Return the product's inventory record, creating an empty one if missing.

    Does not commit; callers own the transaction.
    """
    record = db.session.get(InventoryRecord, product_id)
    if record is None:
        require_product(product_id)
        record = InventoryRecord(
            product_id=product_id,
            initial_total_quantity=initial_quantity,
            current_quantity=initial_quantity,
        )
        db.session.add(record)
        db.session.flush()
    return record


def decrement(product_id: int, by: int, *, commit: bool = True) -> None:
    """
    Remove `by` units, only if at least that many are in stock.

    The check and the write are a single UPDATE ... WHERE, so the floor is
    enforced by the database rather than by what a terminal saw last.
    """
    if by <= 0:
        raise ValidationError("decrement quantity must be > 0")

    def _op():
        stmt = (
            update(InventoryRecord)
            .where(
                InventoryRecord.product_id == product_id,
                InventoryRecord.current_quantity >= by,
            )
            .values(current_quantity=InventoryRecord.current_quantity - by)
            .execution_options(synchronize_session="fetch")
        )
        result = db.session.execute(stmt)
        if result.rowcount == 0:
            raise InsufficientStockError(
                "Insufficient stock",
                details={
                    "product_id": product_id,
                    "requested_quantity": by,
                    "on_hand": current(product_id),
                },
            )

    if commit:
        run_in_transaction(_op)
    else:
        _op()


def increment(product_id: int, by: int, *, commit: bool = True) -> InventoryRecord:
    """Add `by` units to both the current and the initial quantity."""
    if by <= 0:
        raise ValidationError("increment quantity must be > 0")

    def _op():
        ensure_record(product_id)
        stmt = (
            update(InventoryRecord)
            .where(InventoryRecord.product_id == product_id)
            .values(
                current_quantity=InventoryRecord.current_quantity + by,
                initial_total_quantity=InventoryRecord.initial_total_quantity + by,
            )
            .execution_options(synchronize_session="fetch")
        )
        db.session.execute(stmt)
        return db.session.get(InventoryRecord, product_id)

    if commit:
        return run_in_transaction(_op)
    return _op()


def correct(product_id: int, new_current: int, new_initial: int, *, commit: bool = True) -> InventoryRecord:
    """
    Manual override of both counters with operator-supplied values.

    Bypasses all ledger arithmetic on purpose: this is how a physical count
    is reconciled with the system.
    """
    if new_current < 0 or new_initial < 0:
        raise ValidationError("inventory quantities must be >= 0")

    def _op():
        record = ensure_record(product_id)
        record.current_quantity = new_current
        record.initial_total_quantity = new_initial
        db.session.flush()
        return record

    if commit:
        return run_in_transaction(_op)
    return _op()


def stock_percent(current_quantity: int, initial_quantity: int) -> float:
    if initial_quantity <= 0:
        return 100.0 if current_quantity > 0 else 0.0
    return max(current_quantity / initial_quantity * 100.0, 0.0)


def inventory_summary(state: AppState) -> dict:
    """Stock-tab view: per-product fill level plus totals, from a snapshot."""
    rows = []
    for product in state.products:
        rec = state.stock(product.id)
        cur = rec.current_quantity if rec else 0
        initial = rec.initial_total_quantity if rec else 0
        pct = stock_percent(cur, initial)
        rows.append({
            "product_id": product.id,
            "name": product.name,
            "current_quantity": cur,
            "initial_total_quantity": initial,
            "stock_pct": round(pct, 1),
            "is_low": pct <= LOW_STOCK_PCT and cur > 0,
            "is_out": cur <= 0,
        })

    return {
        "total_current": sum(r.current_quantity for r in state.inventory),
        "total_initial": sum(r.initial_total_quantity for r in state.inventory),
        "rows": rows,
    }
