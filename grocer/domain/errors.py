from __future__ import annotations

from typing import Any, Dict, Optional


class PricingError(Exception):
    """
    Base for every error that aborts a pricing call.

    Carries a stable machine code plus a meta payload so callers can log or
    map it without parsing the message. Never caught inside the engine.
    """

    code: str = "PRICING_ERROR"

    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.code}: {self.message}")


class UnconfiguredProduct(PricingError):
    """A cart line references a product without a unit price in the period."""

    code = "UNCONFIGURED_PRODUCT"


class UnknownCouponCode(PricingError):
    """A supplied coupon code matches no entry in the coupon policy."""

    code = "UNKNOWN_COUPON_CODE"


class InvalidConfiguration(PricingError):
    """Bad period/policy data: negative prices, bad tiers, frozen mutation..."""

    code = "INVALID_CONFIGURATION"
