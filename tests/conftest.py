from __future__ import annotations

from decimal import Decimal

import pytest

import grocer.coupon_types  # noqa: F401 (register all coupon types)

from grocer.coupon_types.policy import CouponPolicy, load_coupon_policy
from grocer.domain.models import Cart, Item, Product
from grocer.engine.context import PricingContext
from grocer.engine.discount import apply_tier_discounts
from grocer.engine.period import Period
from grocer.engine.store import Store


@pytest.fixture
def normal():
    # Baseline configuration used by the store scenarios
    period = Period("Normal")
    period.set_unit_price(Product.APPLE, 500.0)
    period.set_unit_price(Product.BANANA, 450.0)
    period.set_discount(Product.APPLE, 5.0, 0.1)
    period.set_discount(Product.APPLE, 20.0, 0.15)
    period.set_discount(Product.BANANA, 2.0, 0.1)
    return period


@pytest.fixture(scope="session")
def shipped_policy():
    return load_coupon_policy()


@pytest.fixture
def test_policy():
    # Explicit magnitudes, independent of the shipped (provisional) policy file
    return CouponPolicy.from_dict(
        {
            "policyVersion": "test",
            "coupons": {
                "KUPON-2000-ULTRAMAX": {"type": "flat_deduction", "params": {"amount": 2000}},
                "A-FREE1": {"type": "free_quantity", "params": {"scope": "A", "maxKg": 1}},
                "B-FREE1": {"type": "free_quantity", "params": {"scope": "B", "maxKg": 1}},
                "A10": {"type": "percentage_off", "params": {"scope": "A", "percent": 10}},
                "X10": {"type": "percentage_off", "params": {"scope": "X", "percent": 10}},
                "A5-MAX10": {
                    "type": "percentage_off",
                    "params": {"scope": "A", "percent": 5, "maxDiscount": 1000},
                },
                "X5-MAX10": {
                    "type": "percentage_off",
                    "params": {"scope": "X", "percent": 5, "maxDiscount": 1000},
                },
            },
        }
    )


@pytest.fixture
def store(shipped_policy, normal):
    s = Store(coupon_policy=shipped_policy)
    s.add_period(normal)
    return s


@pytest.fixture
def make_ctx(normal):
    """Context after the tier-discount step, ready for coupons."""

    def _make(*items):
        cart = Cart([Item(p, Decimal(str(q))) for p, q in items])
        ctx = PricingContext(cart=cart, period=normal)
        apply_tier_discounts(ctx)
        return ctx

    return _make
