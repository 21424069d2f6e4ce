from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from grocer.core.logging_config import logger
from grocer.core.settings import settings
from grocer.coupon_types.base import DECISION_APPLIED
from grocer.coupon_types.policy import CouponPolicy, load_coupon_policy
from grocer.domain.errors import InvalidConfiguration, PricingError
from grocer.domain.models import Cart, PaymentMethod, PriceInfo

from .context import PricingContext
from .coupon_runner import CouponRunner
from .discount import apply_tier_discounts
from .period import Period
from .rewards import RewardCalculator
from .rounding import RoundingPolicy


class Store:
    """
    Pricing entry point.

    price(cart, period, coupon_codes, payment_method):
      1. tier discounts per line        -> pre-coupon total
      2. coupons, left to right         -> coupon-adjusted total (>= 0)
      3. payment-method rounding        -> amount
      4. rewards (bags from weight, gift coupons from amount)

    Any PricingError aborts the call unchanged; no partial PriceInfo exists.
    """

    def __init__(
        self,
        coupon_policy: Optional[CouponPolicy] = None,
        rounding: Optional[RoundingPolicy] = None,
        rewards: Optional[RewardCalculator] = None,
    ):
        self.coupon_policy = coupon_policy or load_coupon_policy(settings.coupon_policy_path)
        self.rounding = rounding or RoundingPolicy(card_bonus_pct=settings.card_bonus_pct)
        self.rewards = rewards or RewardCalculator(
            bag_step_kg=settings.gift_bag_step_kg,
            coupon_threshold=settings.gift_coupon_threshold,
        )
        self.coupon_runner = CouponRunner()
        self._periods: Dict[str, Period] = {}

    # -----------------
    # periods
    # -----------------

    def add_period(self, period: Period) -> Period:
        """Register a period by name. The period is frozen from here on."""
        self._periods[period.name] = period.freeze()
        return period

    def get_period(self, name: str) -> Period:
        try:
            return self._periods[name]
        except KeyError:
            raise InvalidConfiguration(
                f"No period named '{name}'", {"known": sorted(self._periods)}
            ) from None

    @property
    def periods(self) -> List[str]:
        return sorted(self._periods)

    # -----------------
    # pricing
    # -----------------

    def price(
        self,
        cart: Cart,
        period: Period,
        coupon_codes: Iterable[str] = (),
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> PriceInfo:
        codes = list(coupon_codes)
        method = PaymentMethod(payment_method)
        log = logger.bind(period=period.name, payment_method=method.value, coupons=codes)

        try:
            return self._price(cart, period.freeze(), codes, method)
        except PricingError as e:
            log.warning("pricing_failed", code=e.code, message=e.message, meta=e.meta)
            raise

    # Same call under the name the store front uses
    get_cart_price = price

    def _price(
        self, cart: Cart, period: Period, codes: List[str], method: PaymentMethod
    ) -> PriceInfo:
        ctx = PricingContext(cart=cart, period=period)

        pre_coupon = apply_tier_discounts(ctx)

        coupons = self.coupon_policy.parse_all(codes)
        coupon_lines = self.coupon_runner.run(ctx, coupons)

        amount = self.rounding.apply(ctx.total, method)
        ctx.breakdown.add_step(
            "ROUNDING",
            f"{method.value} rounding: {ctx.total:.2f} -> {amount}",
        )

        rewards = self.rewards.calculate(cart, amount)
        if rewards.gift_bag_count:
            ctx.breakdown.add_meta("GIFT_BAGS", f"{rewards.gift_bag_count} gift bag(s)")
        if rewards.gift_coupons:
            ctx.breakdown.add_meta("GIFT_COUPONS", f"{len(rewards.gift_coupons)} gift coupon(s)")

        logger.info(
            "cart_priced",
            period=period.name,
            payment_method=method.value,
            lines=len(ctx.lines),
            pre_coupon_total=str(pre_coupon),
            coupons=codes,
            coupons_applied=sum(1 for c in coupon_lines if c.decision == DECISION_APPLIED),
            amount=str(amount),
            gift_bag_count=rewards.gift_bag_count,
            gift_coupons=len(rewards.gift_coupons),
        )

        return PriceInfo(
            amount=amount,
            gift_bag_count=rewards.gift_bag_count,
            gift_coupons=rewards.gift_coupons,
            breakdown=tuple(ctx.breakdown.as_strings()),
            coupon_lines=tuple(coupon_lines),
            payment_method=method,
        )
