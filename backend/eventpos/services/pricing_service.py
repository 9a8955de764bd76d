"""
Bundle pricing engine.

Pure functions over an AppState snapshot (or anything exposing `product()`
and `promotions_for()`). Nothing here touches the database, so the same
code prices the cart preview on a terminal and the sale at commit time.

Greedy packing: the product's promotions are sorted by trigger quantity,
largest first. Each one is applied as many times as it fits before moving
on to the next, and whatever is left is charged at the suggested unit
price.

Greedy is a heuristic, not an optimal packing. With a schedule where a
smaller bundle is the better deal per unit the buyer can pay more than the
cheapest combination, and the price is only non-decreasing in quantity
when every bundle costs at least the greedy price of one unit fewer.
"""

from __future__ import annotations

from typing import Iterable

from eventpos.money import format_money
from eventpos.state import AppState, PromotionSnapshot


def promotion_schedule(state: AppState, product_id: int) -> list[PromotionSnapshot]:
    """Promotions for the product, largest trigger first (evaluation order)."""
    return sorted(
        state.promotions_for(product_id),
        key=lambda p: p.trigger_quantity,
        reverse=True,
    )


def price_item(state: AppState, product_id: int, quantity: int) -> int:
    """
    Price `quantity` units of a product, in cents.

    Unknown products and non-positive quantities price at 0 rather than
    raising, so a stale terminal never breaks on a catalog change.
    """
    product = state.product(product_id)
    if product is None or quantity <= 0:
        return 0

    remaining = quantity
    total = 0

    for promo in promotion_schedule(state, product_id):
        if promo.trigger_quantity <= 0:
            continue
        while remaining >= promo.trigger_quantity:
            total += promo.bundle_price_cents
            remaining -= promo.trigger_quantity

    if remaining > 0:
        total += remaining * product.suggested_price_cents

    return total


def has_promotion(state: AppState, product_id: int) -> bool:
    return bool(state.promotions_for(product_id))


def best_promotion_label(state: AppState, product_id: int) -> str | None:
    """'Starts at' label for the smallest bundle, e.g. '3un R$ 18,00'."""
    promos = state.promotions_for(product_id)
    if not promos:
        return None
    entry = min(promos, key=lambda p: p.trigger_quantity)
    return f"{entry.trigger_quantity}un {format_money(entry.bundle_price_cents)}"


def quote(state: AppState, lines: Iterable[tuple[int, int]]) -> dict:
    """Price a list of (product_id, quantity) pairs for a cart preview."""
    priced = []
    for product_id, quantity in lines:
        product = state.product(product_id)
        line_total = price_item(state, product_id, quantity)
        priced.append({
            "product_id": product_id,
            "name": product.name if product else None,
            "quantity": quantity,
            "line_total_cents": line_total,
            "list_price_cents": (product.suggested_price_cents * quantity) if product and quantity > 0 else 0,
        })

    return {
        "lines": priced,
        "total_cents": sum(line["line_total_cents"] for line in priced),
        "count": sum(line["quantity"] for line in priced if line["quantity"] > 0),
    }
