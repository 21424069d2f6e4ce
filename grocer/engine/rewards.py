from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Sequence, Tuple

from grocer.domain.errors import InvalidConfiguration
from grocer.domain.models import Cart, to_decimal

D = Decimal

# Closed set of codes a gift coupon may carry. Order drives the rotation.
ALLOWED_GIFT_COUPONS: Tuple[str, ...] = (
    "A10",
    "B10",
    "A-FREE1",
    "B-FREE1",
    "A5-MAX10",
    "B5-MAX10",
    "X5",
    "X10",
    "X5-MAX10",
    "A5-MAX15",
    "B5-MAX15",
    "KUPON-2000-ULTRAMAX",
    "A5",
    "B5",
)


def _floor_div(value: D, step: D) -> int:
    return int((value / step).to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class Rewards:
    gift_bag_count: int
    gift_coupons: Tuple[str, ...]


class RewardCalculator:
    """
    Loyalty rewards of one purchase.

    - gift bags: one per full bag_step_kg of physical cart weight
    - gift coupons: one per full coupon_threshold of the rounded amount,
      codes handed out in fixed rotation over gift_codes starting at the
      first code on every call
    """

    def __init__(
        self,
        bag_step_kg: Any = D("5"),
        coupon_threshold: Any = D("20000"),
        gift_codes: Sequence[str] = ALLOWED_GIFT_COUPONS,
    ):
        self.bag_step_kg = to_decimal(bag_step_kg, "bag_step_kg")
        self.coupon_threshold = to_decimal(coupon_threshold, "coupon_threshold")
        if self.bag_step_kg <= 0 or self.coupon_threshold <= 0:
            raise InvalidConfiguration("Reward steps must be > 0")

        codes = tuple(gift_codes)
        if not codes:
            raise InvalidConfiguration("At least one gift coupon code is required")
        outside = sorted(set(codes) - set(ALLOWED_GIFT_COUPONS))
        if outside:
            raise InvalidConfiguration(
                f"Gift coupon codes outside the allowed set: {outside}",
                {"codes": outside},
            )
        self.gift_codes = codes

    def gift_bag_count(self, cart: Cart) -> int:
        return _floor_div(cart.total_weight_kg, self.bag_step_kg)

    def gift_coupons(self, amount: D) -> Tuple[str, ...]:
        count = _floor_div(max(amount, D("0")), self.coupon_threshold)
        return tuple(self.gift_codes[i % len(self.gift_codes)] for i in range(count))

    def calculate(self, cart: Cart, amount: D) -> Rewards:
        return Rewards(
            gift_bag_count=self.gift_bag_count(cart),
            gift_coupons=self.gift_coupons(amount),
        )
