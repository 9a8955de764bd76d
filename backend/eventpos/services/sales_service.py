"""
Sale commit: turns cart lines into SaleRecords and stock decrements.

Commit policy: all-or-nothing. Every line is priced, appended and
decremented inside one database transaction; if any line fails (unknown
product, not enough stock, storage error) nothing from the commit is kept.
A caller that sees a failure can therefore re-submit the same cart without
double-recording earlier lines. A commit that succeeded is NOT idempotent:
submitting it again records a second sale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from ..extensions import db
from ..models import SaleRecord
from eventpos.time_utils import utcnow, event_day, to_utc_z, to_utc_naive
from .pricing_service import price_item
from .state_service import load_pricing_state
from .inventory_service import decrement, InsufficientStockError
from .concurrency import run_in_transaction


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass
class SaleReceipt:
    records: list[SaleRecord] = field(default_factory=list)
    total_cents: int = 0
    sold_at: datetime | None = None

    @property
    def count(self) -> int:
        return sum(r.quantity_sold for r in self.records)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "total_cents": self.total_cents,
            "count": self.count,
            "sold_at": to_utc_z(self.sold_at),
            "sales": [r.to_dict() for r in self.records],
        }


def _normalize_lines(lines: Iterable) -> list[tuple[int, int]]:
    """Accept CartLine objects, (product_id, quantity) pairs or dicts."""
    normalized = []
    for line in lines:
        if isinstance(line, dict):
            product_id, quantity = line.get("product_id"), line.get("quantity")
        elif isinstance(line, (tuple, list)):
            product_id, quantity = line
        else:
            product_id, quantity = line.product_id, line.quantity
        normalized.append((product_id, quantity))
    return normalized


def commit_sale(lines: Iterable, sold_at: datetime | None = None) -> SaleReceipt:
    """
    Record a multi-line sale.

    Lines are processed in order: price with the engine over the promotions
    stored right now, append the SaleRecord, decrement stock. All lines
    share one timestamp.
    """
    items = _normalize_lines(lines)
    if not items:
        raise SaleError("Cannot commit a sale with no lines")

    for product_id, quantity in items:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise SaleError("Line quantity must be a positive integer", details={"product_id": product_id})

    timestamp = to_utc_naive(sold_at) if sold_at else utcnow()

    def _op():
        pricing = load_pricing_state()
        receipt = SaleReceipt(sold_at=timestamp)

        for product_id, quantity in items:
            if pricing.product(product_id) is None:
                raise SaleError("Product not found", details={"product_id": product_id})

            line_total = price_item(pricing, product_id, quantity)
            record = SaleRecord(
                product_id=product_id,
                quantity_sold=quantity,
                total_price_cents=line_total,
                sold_at=timestamp,
            )
            db.session.add(record)
            db.session.flush()

            try:
                decrement(product_id, quantity, commit=False)
            except InsufficientStockError as exc:
                raise SaleError("Insufficient inventory to complete sale", details=exc.details) from exc

            receipt.records.append(record)
            receipt.total_cents += line_total

        return receipt

    return run_in_transaction(_op)


def list_sales(*, day: date | None = None, tz_name: str = "UTC", limit: int | None = None) -> list[SaleRecord]:
    """Sales newest first, optionally only those on `day` at the venue."""
    rows = db.session.query(SaleRecord).order_by(SaleRecord.sold_at.desc(), SaleRecord.id.desc()).all()
    if day is not None:
        rows = [r for r in rows if event_day(r.sold_at, tz_name) == day]
    if limit is not None:
        rows = rows[:limit]
    return rows
