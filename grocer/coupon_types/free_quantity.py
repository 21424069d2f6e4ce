from __future__ import annotations

from decimal import Decimal

from .base import Coupon, CouponResult, register

D = Decimal


@register
class FreeQuantityCoupon(Coupon):
    """
    <scope>-FREE1: up to maxKg of the scoped product is not charged.

    Charged against the product's lines at their tier-discounted unit price.
    Only the payable amount changes; the physical cart weight (gift bags)
    stays as it is.
    """

    type_name = "free_quantity"

    def __init__(self, code, title, params):
        super().__init__(code, title, params)
        self.product = self._scope_param(allow_cart=False)
        self.max_kg = self._decimal_param("maxKg")

    def apply(self, ctx) -> CouponResult:
        lines = ctx.lines_for(self.product)
        if not lines:
            ctx.breakdown.add_warning(
                "COUPON_NO_EFFECT",
                f"{self.code}: no {self.product.value} in cart",
            )
            return CouponResult.skipped({"reason": "product_not_in_cart"})

        remaining_kg = self.max_kg
        total_taken = D("0")
        freed_kg = D("0")

        for ls in lines:
            if remaining_kg <= 0:
                break
            kg = min(remaining_kg, ls.free_kg_left)
            if kg <= 0:
                continue
            taken = ctx.deduct(kg * ls.effective_unit_price, [ls])
            ls.free_kg += kg
            remaining_kg -= kg
            freed_kg += kg
            total_taken += taken

        if total_taken == 0:
            return CouponResult.skipped({"reason": "nothing_left_to_free"})

        ctx.breakdown.add_step(
            "COUPON",
            f"{self.code}: {freed_kg} kg {self.product.value} free, -{total_taken:.2f}",
        )
        return CouponResult.applied(
            -total_taken, {"product": self.product.value, "kg": str(freed_kg)}
        )
