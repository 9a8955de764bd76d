# Overview: Catalog reads and the setup-time writes for products and promotions.

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Product, Promotion, InventoryRecord
from ..validation import ConflictError, UnknownProductError
from .concurrency import PersistenceError, run_in_transaction


def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.id.asc()).all()


def get_product(product_id: int) -> Product | None:
    return db.session.get(Product, product_id)


def require_product(product_id: int) -> Product:
    product = get_product(product_id)
    if product is None:
        raise UnknownProductError(product_id)
    return product


def create_product(
    *,
    name: str,
    suggested_price_cents: int,
    unit_cost_cents: int = 0,
    category: str = "general",
    units_per_pack: int | None = None,
    initial_quantity: int = 0,
) -> Product:
    """Create a product together with its inventory record."""
    def _op():
        if db.session.query(Product).filter_by(name=name).first():
            raise ConflictError(f"Product {name!r} already exists")

        product = Product(
            name=name,
            category=category,
            unit_cost_cents=unit_cost_cents,
            suggested_price_cents=suggested_price_cents,
            units_per_pack=units_per_pack,
        )
        db.session.add(product)
        db.session.flush()

        db.session.add(InventoryRecord(
            product_id=product.id,
            initial_total_quantity=initial_quantity,
            current_quantity=initial_quantity,
        ))
        return product

    return run_in_transaction(_op)


def list_promotions(product_id: int | None = None) -> list[Promotion]:
    q = db.session.query(Promotion)
    if product_id is not None:
        q = q.filter_by(product_id=product_id)
    return q.order_by(Promotion.product_id.asc(), Promotion.trigger_quantity.asc()).all()


def create_promotion(product_id: int, trigger_quantity: int, bundle_price_cents: int) -> Promotion:
    """Add one tier to a product's price schedule. One promotion per trigger quantity."""
    def _op():
        require_product(product_id)
        exists = db.session.query(Promotion).filter_by(
            product_id=product_id, trigger_quantity=trigger_quantity
        ).first()
        if exists:
            raise ConflictError(
                f"Product {product_id} already has a promotion for {trigger_quantity} units"
            )
        promo = Promotion(
            product_id=product_id,
            trigger_quantity=trigger_quantity,
            bundle_price_cents=bundle_price_cents,
        )
        db.session.add(promo)
        db.session.flush()
        return promo

    try:
        return run_in_transaction(_op)
    except PersistenceError as exc:
        # Lost a race with another terminal creating the same tier
        if isinstance(exc.__cause__, IntegrityError):
            raise ConflictError("Duplicate promotion") from exc
        raise


def delete_promotion(promo_id: int) -> bool:
    def _op():
        promo = db.session.get(Promotion, promo_id)
        if promo is None:
            return False
        db.session.delete(promo)
        return True

    return run_in_transaction(_op)
