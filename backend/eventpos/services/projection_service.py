"""
Dashboard figures and end-of-event projection.

Everything here is derived on each call from an AppState snapshot and a
wall-clock instant; nothing is stored. Only sales and expenses whose
timestamp falls on the same calendar day as `now` (in the event timezone)
are counted.

Money values are cents. Sums stay integers; rates, shares and projections
are floats and are rounded to whole cents only when serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from eventpos.money import round_cents
from eventpos.state import AppState, SaleSnapshot
from eventpos.time_utils import event_day, fractional_hour

# Floor for the expense-rate denominator: early in the event a near-zero
# elapsed window would otherwise extrapolate one purchase into a fortune.
MIN_EXPENSE_RATE_HOURS = 0.5


@dataclass(frozen=True)
class EventSettings:
    start_hour: float = 8.0
    end_hour: float = 18.5
    partner_count: int = 2
    goal_per_partner_cents: int = 400000
    timezone: str = "UTC"
    recent_sales_limit: int = 15

    def __post_init__(self):
        if self.end_hour <= self.start_hour:
            raise ValueError("EVENT_END_HOUR must be after EVENT_START_HOUR")
        if self.partner_count < 1:
            raise ValueError("PARTNER_COUNT must be >= 1")
        if self.goal_per_partner_cents <= 0:
            raise ValueError("GOAL_PER_PARTNER_CENTS must be > 0")

    @property
    def duration_hours(self) -> float:
        return self.end_hour - self.start_hour

    @classmethod
    def from_config(cls, config: Mapping) -> "EventSettings":
        return cls(
            start_hour=float(config.get("EVENT_START_HOUR", 8.0)),
            end_hour=float(config.get("EVENT_END_HOUR", 18.5)),
            partner_count=int(config.get("PARTNER_COUNT", 2)),
            goal_per_partner_cents=int(config.get("GOAL_PER_PARTNER_CENTS", 400000)),
            timezone=config.get("EVENT_TIMEZONE", "UTC"),
            recent_sales_limit=int(config.get("RECENT_SALES_LIMIT", 15)),
        )


@dataclass(frozen=True)
class Projection:
    elapsed_hours: float
    remaining_hours: float
    gross_cents: int
    cost_cents: int
    net_cents: int
    expenses_cents: int
    cash_balance_cents: int
    per_partner_share_cents: float
    goal_percent: float
    rate_per_hour_cents: float
    projected_gross_cents: float
    projected_expense_cents: float
    projected_per_partner_net_cents: float
    items_sold: int = 0
    sales_count: int = 0
    recent_sales: tuple[SaleSnapshot, ...] = field(default_factory=tuple)

    @property
    def is_closed(self) -> bool:
        return self.remaining_hours <= 0

    def to_dict(self) -> dict:
        return {
            "elapsed_hours": round(self.elapsed_hours, 2),
            "remaining_hours": round(self.remaining_hours, 2),
            "is_closed": self.is_closed,
            "gross_cents": self.gross_cents,
            "cost_cents": self.cost_cents,
            "net_cents": self.net_cents,
            "expenses_cents": self.expenses_cents,
            "cash_balance_cents": self.cash_balance_cents,
            "per_partner_share_cents": round_cents(self.per_partner_share_cents),
            "goal_percent": round(self.goal_percent, 1),
            "rate_per_hour_cents": round_cents(self.rate_per_hour_cents),
            "projected_gross_cents": round_cents(self.projected_gross_cents),
            "projected_expense_cents": round_cents(self.projected_expense_cents),
            "projected_per_partner_net_cents": round_cents(self.projected_per_partner_net_cents),
            "items_sold": self.items_sold,
            "sales_count": self.sales_count,
            "recent_sales": [s.to_dict() for s in self.recent_sales],
        }


def elapsed_hours(now: datetime, settings: EventSettings) -> float:
    """Hours of the event window already behind us, clamped to [0, duration]."""
    hour = fractional_hour(now, settings.timezone)
    return min(max(hour - settings.start_hour, 0.0), settings.duration_hours)


def remaining_hours(now: datetime, settings: EventSettings) -> float:
    return settings.duration_hours - elapsed_hours(now, settings)


def goal_percent(per_partner_share_cents: float, settings: EventSettings) -> float:
    pct = per_partner_share_cents / settings.goal_per_partner_cents * 100.0
    return min(max(pct, 0.0), 100.0)


def compute_projection(state: AppState, now: datetime, settings: EventSettings) -> Projection:
    today = event_day(now, settings.timezone)
    sales = [s for s in state.sales if event_day(s.sold_at, settings.timezone) == today]
    expenses = [e for e in state.expenses if event_day(e.recorded_at, settings.timezone) == today]

    hrs = elapsed_hours(now, settings)
    hrs_left = settings.duration_hours - hrs

    gross = sum(s.total_price_cents for s in sales)
    cost = 0
    for s in sales:
        product = state.product(s.product_id)
        if product is not None:
            cost += product.unit_cost_cents * s.quantity_sold
    net = gross - cost

    spent = sum(e.total_cost_cents for e in expenses)
    cash_balance = gross - spent
    per_partner = cash_balance / settings.partner_count

    rate = gross / hrs if hrs > 0 else 0.0
    projected_gross = gross + rate * hrs_left
    projected_expense = spent + (spent / max(hrs, MIN_EXPENSE_RATE_HOURS)) * hrs_left
    projected_per_partner = (projected_gross - projected_expense) / settings.partner_count

    return Projection(
        elapsed_hours=hrs,
        remaining_hours=hrs_left,
        gross_cents=gross,
        cost_cents=cost,
        net_cents=net,
        expenses_cents=spent,
        cash_balance_cents=cash_balance,
        per_partner_share_cents=per_partner,
        goal_percent=goal_percent(per_partner, settings),
        rate_per_hour_cents=rate,
        projected_gross_cents=projected_gross,
        projected_expense_cents=projected_expense,
        projected_per_partner_net_cents=projected_per_partner,
        items_sold=sum(s.quantity_sold for s in sales),
        sales_count=len(sales),
        recent_sales=tuple(sales[: settings.recent_sales_limit]),
    )
