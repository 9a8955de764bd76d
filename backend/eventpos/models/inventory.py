from __future__ import annotations

from ..extensions import db
from eventpos.time_utils import to_utc_z


class InventoryRecord(db.Model):
    """
    Stock counter for one product (1:1 with Product).

    Unlike a transaction ledger, the quantity is a stored mutable field:
    sales decrement it, restocks increment it, and a manual correction may
    overwrite both counters with a physical count.

    `initial_total_quantity` is the baseline used for the stock bar; a
    restock raises it together with `current_quantity`.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        db.CheckConstraint("current_quantity >= 0", name="current_non_negative"),
        db.CheckConstraint("initial_total_quantity >= 0", name="initial_non_negative"),
    )

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), primary_key=True)
    initial_total_quantity = db.Column(db.Integer, nullable=False, default=0)
    current_quantity = db.Column(db.Integer, nullable=False, default=0)

    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    product = db.relationship("Product", backref=db.backref("inventory", uselist=False, lazy=True))

    def __repr__(self) -> str:
        return (
            f"<InventoryRecord product_id={self.product_id} "
            f"current={self.current_quantity} initial={self.initial_total_quantity}>"
        )

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "initial_total_quantity": self.initial_total_quantity,
            "current_quantity": self.current_quantity,
            "updated_at": to_utc_z(self.updated_at),
        }
