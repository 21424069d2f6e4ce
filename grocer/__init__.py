"""Cart pricing engine: tier discounts, coupons, payment rounding and loyalty rewards."""

from grocer.domain import (  # noqa
    Cart,
    CouponLine,
    InvalidConfiguration,
    Item,
    PaymentMethod,
    PriceInfo,
    PricingError,
    Product,
    UnconfiguredProduct,
    UnknownCouponCode,
)
from grocer.engine import (  # noqa
    ALLOWED_GIFT_COUPONS,
    Period,
    RewardCalculator,
    RoundingPolicy,
    Store,
    load_period,
)
from grocer.coupon_types import CouponPolicy, load_coupon_policy  # noqa

__version__ = "0.7.0"
