from .period import DiscountTier, Period, load_period  # noqa
from .rewards import ALLOWED_GIFT_COUPONS, RewardCalculator  # noqa
from .rounding import RoundingPolicy, round_card, round_cash  # noqa
from .store import Store  # noqa
