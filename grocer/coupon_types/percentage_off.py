from __future__ import annotations

from decimal import Decimal
from typing import Optional

from grocer.domain.errors import InvalidConfiguration

from .base import Coupon, CouponResult, register

D = Decimal


@register
class PercentageOffCoupon(Coupon):
    """
    <scope><pct> and <scope><pct>-MAX<cap>.

    Scope A/B takes the percentage of what the product's lines still carry,
    scope X of the whole running total. maxDiscount (optional) caps the
    deduction as an absolute amount.
    """

    type_name = "percentage_off"

    def __init__(self, code, title, params):
        super().__init__(code, title, params)
        self.product = self._scope_param(allow_cart=True)
        percent = self._decimal_param("percent")
        if percent > D("100"):
            raise InvalidConfiguration(
                f"Coupon {self.code}: percent must be <= 100, got {percent}",
                {"code": self.code},
            )
        self.fraction = percent / D("100")
        self.max_discount: Optional[D] = (
            self._decimal_param("maxDiscount") if "maxDiscount" in self.params else None
        )

    @property
    def scope_label(self) -> str:
        return "cart" if self.product is None else self.product.value

    def apply(self, ctx) -> CouponResult:
        if self.product is None:
            lines = []
            base = ctx.total
        else:
            lines = ctx.lines_for(self.product)
            if not lines:
                ctx.breakdown.add_warning(
                    "COUPON_NO_EFFECT",
                    f"{self.code}: no {self.product.value} in cart",
                )
                return CouponResult.skipped({"reason": "product_not_in_cart"})
            base = sum((ls.net for ls in lines), D("0"))

        discount = base * self.fraction
        capped = False
        if self.max_discount is not None and discount > self.max_discount:
            discount = self.max_discount
            capped = True

        taken = ctx.deduct(discount, lines)
        if taken == 0:
            return CouponResult.skipped({"reason": "nothing_to_discount"})

        msg = f"{self.code}: -{taken:.2f} on {self.scope_label}"
        if capped:
            msg += f" (capped at {self.max_discount:.2f})"
        ctx.breakdown.add_step("COUPON", msg)

        return CouponResult.applied(
            -taken,
            {"scope": self.scope_label, "base": str(base), "capped": capped},
        )
