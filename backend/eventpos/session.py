"""
One selling terminal: its current snapshot, its cart and its commit guard.

The session is the only owner of its AppState. `refresh()` replaces the
snapshot wholesale and bumps the version; polling clients call
`refresh_if_stale()` on their own interval. A refresh racing a commit is
harmless because the refresh that follows a successful commit is what
brings the terminal back in line.

Must be used inside a Flask application context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from .cart import Cart
from .extensions import db
from .money import format_money
from .services import state_service, sales_service
from .services.concurrency import PersistenceError
from .services.sales_service import SaleError
from .state import AppState
from .time_utils import utcnow

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Could not record the sale."


@dataclass(frozen=True)
class CommitResult:
    success: bool
    total_cents: int = 0
    message: str = ""
    details: dict | None = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "total_cents": self.total_cents,
            "message": self.message,
            "details": self.details or {},
        }


class TerminalSession:
    def __init__(self, refresh_interval_seconds: int = 12, state: AppState | None = None):
        self.refresh_interval = timedelta(seconds=refresh_interval_seconds)
        self.cart = Cart()
        self._state = state or AppState()
        self._submitting = False

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def submitting(self) -> bool:
        return self._submitting

    def refresh(self) -> AppState:
        self._state = state_service.load_state(version=self._state.version + 1)
        return self._state

    def refresh_if_stale(self, now: datetime | None = None) -> bool:
        now = now or utcnow()
        fetched = self._state.fetched_at
        if fetched is None or now - fetched >= self.refresh_interval:
            self.refresh()
            return True
        return False

    # Cart shortcuts bound to the current snapshot
    def add(self, product_id: int) -> bool:
        return self.cart.increment(self._state, product_id)

    def remove(self, product_id: int) -> None:
        self.cart.decrement(product_id)

    def cart_total(self) -> int:
        return self.cart.total(self._state)

    def commit(self) -> CommitResult | None:
        """
        Commit the cart as one sale.

        Returns None without doing anything when the cart is empty or a
        commit from this session is already running. Domain and storage
        failures come back as an unsuccessful CommitResult and leave the
        cart as it was.
        """
        if self._submitting:
            return None
        lines = self.cart.lines(self._state)
        if not lines:
            return None

        self._submitting = True
        try:
            receipt = sales_service.commit_sale(lines)
        except SaleError as exc:
            logger.warning("Sale rejected: %s %s", exc, exc.details)
            return CommitResult(success=False, message=str(exc), details=exc.details)
        except PersistenceError:
            logger.exception("Sale commit failed in storage")
            return CommitResult(success=False, message=GENERIC_FAILURE)
        finally:
            self._submitting = False

        # Sale is committed past this point
        self.cart.clear()
        try:
            self.refresh()
        except (SQLAlchemyError, PersistenceError):
            db.session.rollback()
            logger.exception("Sale recorded but the state reload failed")
        logger.info("Sale recorded: %d lines, %s", len(receipt.records), format_money(receipt.total_cents))
        return CommitResult(
            success=True,
            total_cents=receipt.total_cents,
            message=f"{format_money(receipt.total_cents)} recorded",
        )
