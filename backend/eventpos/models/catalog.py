from __future__ import annotations

from ..extensions import db
from eventpos.time_utils import to_utc_z


class Product(db.Model):
    """
    Catalog entry for one sellable item.

    Products are fixed for the duration of the event; the stand is set up
    with them beforehand (see `flask event seed`) and sales never edit them.

    Money is stored in cents. `suggested_price_cents` is the single-unit
    price used for any units not covered by a promotion bundle.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_products_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(64), nullable=False, default="general")

    unit_cost_cents = db.Column(db.Integer, nullable=False, default=0)
    suggested_price_cents = db.Column(db.Integer, nullable=False)

    # Informational only (e.g. 12 cans per pack); pricing never reads it
    units_per_pack = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit_cost_cents": self.unit_cost_cents,
            "suggested_price_cents": self.suggested_price_cents,
            "units_per_pack": self.units_per_pack,
            "created_at": to_utc_z(self.created_at),
        }


class Promotion(db.Model):
    """
    Bundle promotion: `trigger_quantity` units of one product for a fixed
    `bundle_price_cents`.

    Several promotions on the same product form its price schedule. Rows
    carry no ordering; the pricing engine sorts them when it evaluates.
    """
    __tablename__ = "promotions"
    __table_args__ = (
        db.UniqueConstraint("product_id", "trigger_quantity", name="uq_promotions_product_trigger"),
        db.CheckConstraint("trigger_quantity > 0", name="trigger_positive"),
        db.CheckConstraint("bundle_price_cents >= 0", name="bundle_price_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    trigger_quantity = db.Column(db.Integer, nullable=False)
    bundle_price_cents = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    product = db.relationship("Product", backref=db.backref("promotions", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "trigger_quantity": self.trigger_quantity,
            "bundle_price_cents": self.bundle_price_cents,
            "created_at": to_utc_z(self.created_at),
        }
