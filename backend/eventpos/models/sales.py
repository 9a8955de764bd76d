from __future__ import annotations

from ..extensions import db
from eventpos.time_utils import to_utc_z


class SaleRecord(db.Model):
    """
    One committed cart line.

    `total_price_cents` is the pricing engine's output for
    (product, quantity_sold) under the promotions stored at commit time,
    not quantity * unit price. Rows are append-only.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.CheckConstraint("quantity_sold > 0", name="quantity_positive"),
        db.Index("ix_sales_sold_at", "sold_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    quantity_sold = db.Column(db.Integer, nullable=False)
    total_price_cents = db.Column(db.Integer, nullable=False)

    # Business time (UTC-naive), set by the service at commit
    sold_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity_sold": self.quantity_sold,
            "total_price_cents": self.total_price_cents,
            "sold_at": to_utc_z(self.sold_at),
        }
