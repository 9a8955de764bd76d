# Overview: Bulk read of everything a terminal displays, frozen into an AppState.

from __future__ import annotations

from ..extensions import db
from ..models import Product, InventoryRecord, SaleRecord, Promotion, ExpenseRecord
from ..state import (
    AppState,
    ProductSnapshot,
    InventorySnapshot,
    SaleSnapshot,
    PromotionSnapshot,
    ExpenseSnapshot,
)
from eventpos.time_utils import utcnow


def load_pricing_state() -> AppState:
    """Products and promotions only; enough for the pricing engine."""
    products = db.session.query(Product).order_by(Product.id.asc()).all()
    promotions = db.session.query(Promotion).all()
    return AppState(
        products=tuple(ProductSnapshot.from_model(p) for p in products),
        promotions=tuple(PromotionSnapshot.from_model(p) for p in promotions),
    )


def load_state(version: int = 0) -> AppState:
    """
    Read every table the terminal shows and freeze it.

    Sales come newest first. The result is a full replacement for whatever
    snapshot the caller held before; nothing is merged.
    """
    products = db.session.query(Product).order_by(Product.id.asc()).all()
    inventory = db.session.query(InventoryRecord).order_by(InventoryRecord.product_id.asc()).all()
    sales = db.session.query(SaleRecord).order_by(SaleRecord.sold_at.desc(), SaleRecord.id.desc()).all()
    promotions = db.session.query(Promotion).order_by(Promotion.id.asc()).all()
    expenses = db.session.query(ExpenseRecord).order_by(ExpenseRecord.recorded_at.desc(), ExpenseRecord.id.desc()).all()

    return AppState(
        version=version,
        fetched_at=utcnow(),
        products=tuple(ProductSnapshot.from_model(p) for p in products),
        inventory=tuple(InventorySnapshot.from_model(r) for r in inventory),
        sales=tuple(SaleSnapshot.from_model(s) for s in sales),
        promotions=tuple(PromotionSnapshot.from_model(p) for p in promotions),
        expenses=tuple(ExpenseSnapshot.from_model(e) for e in expenses),
    )
