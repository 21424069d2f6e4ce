from .errors import (  # noqa
    InvalidConfiguration,
    PricingError,
    UnconfiguredProduct,
    UnknownCouponCode,
)
from .models import Cart, CouponLine, Item, PaymentMethod, PriceInfo, Product  # noqa
