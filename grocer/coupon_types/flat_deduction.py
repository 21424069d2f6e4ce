from __future__ import annotations

from .base import Coupon, CouponResult, register


@register
class FlatDeductionCoupon(Coupon):
    """
    Fixed amount off the running total (KUPON-2000-ULTRAMAX).
    Stackable: each application sees the already reduced total, clamped at 0.
    """

    type_name = "flat_deduction"

    def __init__(self, code, title, params):
        super().__init__(code, title, params)
        self.amount = self._decimal_param("amount")

    def apply(self, ctx) -> CouponResult:
        before = ctx.total
        taken = ctx.deduct(self.amount)
        if taken == 0:
            return CouponResult.skipped({"reason": "total_already_zero"})

        ctx.breakdown.add_step(
            "COUPON",
            f"{self.code}: -{taken:.2f} ({before:.2f} -> {ctx.total:.2f})",
        )
        return CouponResult.applied(-taken, {"amount": str(self.amount), "taken": str(taken)})
