from __future__ import annotations

from ..extensions import db
from eventpos.time_utils import to_utc_z


class ExpenseRecord(db.Model):
    """
    Money spent during the event.

    product_id set   -> restock purchase (inventory was incremented by `quantity`)
    product_id NULL  -> miscellaneous cost such as ice or cups (quantity 1)

    Append-only.
    """
    __tablename__ = "expenses"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="quantity_positive"),
        db.CheckConstraint("total_cost_cents > 0", name="cost_positive"),
        db.Index("ix_expenses_recorded_at", "recorded_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=True, index=True)
    label = db.Column(db.String(120), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    total_cost_cents = db.Column(db.Integer, nullable=False)

    recorded_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def is_restock(self) -> bool:
        return self.product_id is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "label": self.label,
            "quantity": self.quantity,
            "total_cost_cents": self.total_cost_cents,
            "recorded_at": to_utc_z(self.recorded_at),
            "is_restock": self.is_restock,
        }
