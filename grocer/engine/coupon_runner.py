from __future__ import annotations

from typing import List, Sequence

from grocer.coupon_types.base import Coupon
from grocer.domain.models import CouponLine

from .context import PricingContext


class CouponRunner:
    """
    Left fold of coupons over the running total, in list order.

    Order matters: every coupon sees the total left by the previous one.
    Codes are parsed before the runner is invoked, so an unknown code never
    leaves a partially discounted total behind.
    """

    def run(self, ctx: PricingContext, coupons: Sequence[Coupon]) -> List[CouponLine]:
        lines: List[CouponLine] = []
        for coupon in coupons:
            result = coupon.apply(ctx)
            lines.append(
                CouponLine(
                    code=coupon.code,
                    coupon_type=coupon.type_name,
                    decision=result.decision,
                    delta=result.delta,
                    total_after=ctx.total,
                    meta=dict(result.meta),
                )
            )
        return lines
