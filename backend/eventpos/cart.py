from __future__ import annotations

from dataclasses import dataclass

from eventpos.services.pricing_service import price_item
from eventpos.state import AppState


@dataclass(frozen=True)
class CartLine:
    product_id: int
    quantity: int


class Cart:
    """
    In-memory selection built before a sale is committed.

    Maps product_id -> quantity; a key is present only while its quantity
    is > 0. The stock cap is advisory: it is checked against the snapshot
    the terminal holds, and the commit re-checks against the database.
    """

    def __init__(self):
        self._items: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._items

    @property
    def is_empty(self) -> bool:
        return not self._items

    def quantity(self, product_id: int) -> int:
        return self._items.get(product_id, 0)

    def increment(self, state: AppState, product_id: int) -> bool:
        """Add one unit. No-op (returns False) past the stock on hand or for unknown products."""
        if state.product(product_id) is None:
            return False
        stock = state.stock(product_id)
        if stock is None:
            return False
        q = self.quantity(product_id)
        if q + 1 > stock.current_quantity:
            return False
        self._items[product_id] = q + 1
        return True

    def decrement(self, product_id: int) -> None:
        q = self.quantity(product_id)
        if q > 1:
            self._items[product_id] = q - 1
        else:
            self._items.pop(product_id, None)

    def set_quantity(self, state: AppState, product_id: int, quantity: int) -> int:
        """Set a line directly; capped at stock, removed at zero. Returns the stored quantity."""
        stock = state.stock(product_id)
        if quantity <= 0 or state.product(product_id) is None or stock is None:
            self._items.pop(product_id, None)
            return 0
        quantity = min(quantity, stock.current_quantity)
        if quantity <= 0:
            self._items.pop(product_id, None)
            return 0
        self._items[product_id] = quantity
        return quantity

    def clear(self) -> None:
        self._items.clear()

    def lines(self, state: AppState) -> list[CartLine]:
        """Lines for products the snapshot knows about, in insertion order."""
        return [
            CartLine(product_id=pid, quantity=q)
            for pid, q in self._items.items()
            if q > 0 and state.product(pid) is not None
        ]

    def total(self, state: AppState) -> int:
        return sum(price_item(state, line.product_id, line.quantity) for line in self.lines(state))

    def count(self) -> int:
        return sum(q for q in self._items.values() if q > 0)

    def to_dict(self, state: AppState) -> dict:
        return {
            "lines": [
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "line_total_cents": price_item(state, line.product_id, line.quantity),
                }
                for line in self.lines(state)
            ],
            "count": self.count(),
            "total_cents": self.total(state),
        }
