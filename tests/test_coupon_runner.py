from decimal import Decimal

from grocer.domain.models import CouponLine, Product
from grocer.engine.coupon_runner import CouponRunner


def test_runner_folds_left_and_never_goes_negative(make_ctx, test_policy):
    # 1500 in the cart, three flat coupons of 2000
    ctx = make_ctx((Product.APPLE, 3))
    coupons = test_policy.parse_all(["KUPON-2000-ULTRAMAX"] * 3)

    lines = CouponRunner().run(ctx, coupons)

    assert all(isinstance(line, CouponLine) for line in lines)
    assert [line.total_after for line in lines] == [Decimal("0")] * 3
    assert [line.decision for line in lines] == ["APPLIED", "SKIPPED", "SKIPPED"]
    assert ctx.total == Decimal("0")


def test_runner_total_after_tracks_running_total(make_ctx, test_policy):
    # 3600 + 2835 = 6435
    ctx = make_ctx((Product.APPLE, 8), (Product.BANANA, 7))
    lines = CouponRunner().run(ctx, test_policy.parse_all(["X10", "KUPON-2000-ULTRAMAX"]))

    assert [line.total_after for line in lines] == [Decimal("5791.5"), Decimal("3791.5")]
    assert lines[0].meta["scope"] == "cart"
    assert sum((line.delta for line in lines), Decimal("0")) == Decimal("-2643.5")


def test_runner_without_coupons_keeps_total(make_ctx):
    ctx = make_ctx((Product.BANANA, 2))
    assert CouponRunner().run(ctx, []) == []
    assert ctx.total == Decimal("810")
