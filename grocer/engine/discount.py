from __future__ import annotations

from decimal import Decimal
from typing import List

from .context import PricingContext
from .line_state import LineState

D = Decimal


def build_lines(ctx: PricingContext) -> List[LineState]:
    """
    One LineState per cart item, priced from the period.
    Raises UnconfiguredProduct on the first item without a unit price.
    """
    lines: List[LineState] = []
    for line_no, item in enumerate(ctx.cart, start=1):
        ls = LineState.from_item(line_no, item)
        ls.unit_price = ctx.period.unit_price(item.product)
        ls.discount_fraction = ctx.period.discount_fraction(item.product, item.quantity_kg)
        lines.append(ls)
    return lines


def apply_tier_discounts(ctx: PricingContext) -> D:
    """
    line subtotal = qty * unit price
    line net      = subtotal * (1 - fraction of the highest tier reached)

    The fraction applies flat to the whole line. Returns the pre-coupon total.
    """
    ctx.lines = build_lines(ctx)

    for ls in ctx.lines:
        ls.subtotal = ls.qty * ls.unit_price
        ls.net = ls.subtotal * (D("1") - ls.discount_fraction)

        ctx.breakdown.add_step(
            "LINE",
            f"{ls.product.value} {ls.qty} kg x {ls.unit_price}/kg = {LineState.q(ls.subtotal)}",
        )
        if ls.discount_fraction > 0:
            pct = (ls.discount_fraction * 100).normalize()
            ctx.breakdown.add_step(
                "TIER_DISCOUNT",
                f"{ls.product.value} tier discount -{pct:f}% -> {LineState.q(ls.net)}",
            )

    return ctx.recompute_total()
