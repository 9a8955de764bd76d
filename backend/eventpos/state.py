"""
Immutable application-state snapshot.

A terminal works from one `AppState` at a time. `state_service.load_state`
builds it from a bulk read and `TerminalSession.refresh` swaps it out
wholesale; nothing mutates a snapshot in place. Pricing, cart and
projection functions take the snapshot as an argument instead of reading
shared globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from eventpos.time_utils import to_utc_z


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    name: str
    suggested_price_cents: int
    unit_cost_cents: int = 0
    category: str = "general"
    units_per_pack: Optional[int] = None

    @classmethod
    def from_model(cls, product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            unit_cost_cents=product.unit_cost_cents,
            suggested_price_cents=product.suggested_price_cents,
            units_per_pack=product.units_per_pack,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit_cost_cents": self.unit_cost_cents,
            "suggested_price_cents": self.suggested_price_cents,
            "units_per_pack": self.units_per_pack,
        }


@dataclass(frozen=True)
class InventorySnapshot:
    product_id: int
    initial_total_quantity: int
    current_quantity: int

    @classmethod
    def from_model(cls, record) -> "InventorySnapshot":
        return cls(
            product_id=record.product_id,
            initial_total_quantity=record.initial_total_quantity,
            current_quantity=record.current_quantity,
        )

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "initial_total_quantity": self.initial_total_quantity,
            "current_quantity": self.current_quantity,
        }


@dataclass(frozen=True)
class PromotionSnapshot:
    id: int
    product_id: int
    trigger_quantity: int
    bundle_price_cents: int

    @classmethod
    def from_model(cls, promo) -> "PromotionSnapshot":
        return cls(
            id=promo.id,
            product_id=promo.product_id,
            trigger_quantity=promo.trigger_quantity,
            bundle_price_cents=promo.bundle_price_cents,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "trigger_quantity": self.trigger_quantity,
            "bundle_price_cents": self.bundle_price_cents,
        }


@dataclass(frozen=True)
class SaleSnapshot:
    id: int
    product_id: int
    quantity_sold: int
    total_price_cents: int
    sold_at: datetime

    @classmethod
    def from_model(cls, sale) -> "SaleSnapshot":
        return cls(
            id=sale.id,
            product_id=sale.product_id,
            quantity_sold=sale.quantity_sold,
            total_price_cents=sale.total_price_cents,
            sold_at=sale.sold_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity_sold": self.quantity_sold,
            "total_price_cents": self.total_price_cents,
            "sold_at": to_utc_z(self.sold_at),
        }


@dataclass(frozen=True)
class ExpenseSnapshot:
    id: int
    product_id: Optional[int]
    label: str
    quantity: int
    total_cost_cents: int
    recorded_at: datetime

    @classmethod
    def from_model(cls, expense) -> "ExpenseSnapshot":
        return cls(
            id=expense.id,
            product_id=expense.product_id,
            label=expense.label,
            quantity=expense.quantity,
            total_cost_cents=expense.total_cost_cents,
            recorded_at=expense.recorded_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "label": self.label,
            "quantity": self.quantity,
            "total_cost_cents": self.total_cost_cents,
            "recorded_at": to_utc_z(self.recorded_at),
        }


@dataclass(frozen=True)
class AppState:
    """One consistent view of everything a terminal shows. Sales are newest first."""
    version: int = 0
    fetched_at: Optional[datetime] = None
    products: tuple[ProductSnapshot, ...] = field(default_factory=tuple)
    inventory: tuple[InventorySnapshot, ...] = field(default_factory=tuple)
    sales: tuple[SaleSnapshot, ...] = field(default_factory=tuple)
    promotions: tuple[PromotionSnapshot, ...] = field(default_factory=tuple)
    expenses: tuple[ExpenseSnapshot, ...] = field(default_factory=tuple)

    def product(self, product_id: int) -> Optional[ProductSnapshot]:
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    def stock(self, product_id: int) -> Optional[InventorySnapshot]:
        for rec in self.inventory:
            if rec.product_id == product_id:
                return rec
        return None

    def promotions_for(self, product_id: int) -> list[PromotionSnapshot]:
        return [p for p in self.promotions if p.product_id == product_id]

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "fetched_at": to_utc_z(self.fetched_at),
            "products": [p.to_dict() for p in self.products],
            "inventory": [i.to_dict() for i in self.inventory],
            "sales": [s.to_dict() for s in self.sales],
            "promotions": [p.to_dict() for p in self.promotions],
            "expenses": [e.to_dict() for e in self.expenses],
        }
