# Ensure registration happens by importing modules
from .base import Coupon, CouponResult, coupon_registry  # noqa
from . import (  # noqa
    flat_deduction,
    free_quantity,
    percentage_off,
)
from .policy import CouponPolicy, CouponSpec, load_coupon_policy  # noqa
