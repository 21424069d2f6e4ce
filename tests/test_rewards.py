from decimal import Decimal

import pytest

from grocer.domain.errors import InvalidConfiguration
from grocer.domain.models import Cart, Item, Product
from grocer.engine.rewards import ALLOWED_GIFT_COUPONS, RewardCalculator


def _cart(*weights):
    return Cart([Item(Product.APPLE, Decimal(str(w))) for w in weights])


@pytest.mark.parametrize(
    "weights, bags",
    [
        ((), 0),
        (("4.99",), 0),
        (("4.9", "0.1"), 1),
        (("6.8", "3.5"), 2),
        (("60.2", "63.2"), 24),
    ],
)
def test_gift_bags_from_physical_weight(weights, bags):
    assert RewardCalculator().gift_bag_count(_cart(*weights)) == bags


@pytest.mark.parametrize(
    "amount, count",
    [
        ("0", 0),
        ("19999.9", 0),
        ("20000", 1),
        ("20305", 1),
        ("50600", 2),
        ("105250", 5),
    ],
)
def test_gift_coupon_count(amount, count):
    coupons = RewardCalculator().gift_coupons(Decimal(amount))
    assert len(coupons) == count
    assert all(c in ALLOWED_GIFT_COUPONS for c in coupons)


def test_gift_coupons_rotate_from_first_code():
    calc = RewardCalculator()
    assert calc.gift_coupons(Decimal("50600")) == ("A10", "B10")
    # same input, same codes (no state between calls)
    assert calc.gift_coupons(Decimal("50600")) == ("A10", "B10")


def test_gift_coupons_wrap_around():
    calc = RewardCalculator()
    n = len(ALLOWED_GIFT_COUPONS) + 1
    coupons = calc.gift_coupons(Decimal(20000 * n))
    assert len(coupons) == n
    assert coupons[-1] == ALLOWED_GIFT_COUPONS[0]


def test_custom_gift_codes_subset():
    calc = RewardCalculator(gift_codes=["X5"])
    assert calc.gift_coupons(Decimal("60000")) == ("X5", "X5", "X5")


def test_custom_gift_codes_outside_allowed_set_rejected():
    with pytest.raises(InvalidConfiguration):
        RewardCalculator(gift_codes=["A10", "FREE-BEER"])


@pytest.mark.parametrize("kwargs", [{"bag_step_kg": 0}, {"coupon_threshold": "-1"}, {"gift_codes": []}])
def test_invalid_reward_config(kwargs):
    with pytest.raises(InvalidConfiguration):
        RewardCalculator(**kwargs)


def test_calculate_combines_both():
    out = RewardCalculator().calculate(_cart("8", "7"), Decimal("2435"))
    assert out.gift_bag_count == 3
    assert out.gift_coupons == ()
