from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Type, TYPE_CHECKING

from grocer.domain.errors import InvalidConfiguration
from grocer.domain.models import Product, to_decimal

D = Decimal

# Decisions (avoid string typos)
DECISION_APPLIED = "APPLIED"
DECISION_SKIPPED = "SKIPPED"

# Scope code meaning "whole cart" for percentage coupons
CART_SCOPE = "X"

if TYPE_CHECKING:
    from ..engine.context import PricingContext


@dataclass(frozen=True)
class CouponResult:
    """
    Result of applying one coupon.
    - decision: APPLIED / SKIPPED
    - delta: change of the running total (<= 0)
    - meta: explainability payload
    """

    decision: str
    delta: D
    meta: Dict[str, Any]

    @staticmethod
    def applied(delta: D, meta: Optional[Dict[str, Any]] = None) -> "CouponResult":
        return CouponResult(decision=DECISION_APPLIED, delta=delta, meta=meta or {})

    @staticmethod
    def skipped(meta: Optional[Dict[str, Any]] = None) -> "CouponResult":
        return CouponResult(decision=DECISION_SKIPPED, delta=D("0"), meta=meta or {})


class Coupon:
    """
    Base class for all coupon families. Subclasses validate their params in
    __init__ and implement apply(ctx), which may only lower ctx.total and
    must go through ctx.deduct so the total never drops below zero.
    """

    type_name: str = "base"

    def __init__(self, code: str, title: str, params: Dict[str, Any]):
        self.code = str(code)
        self.title = str(title)
        self.params = params or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r})"

    def apply(self, ctx: "PricingContext") -> CouponResult:
        raise NotImplementedError

    # -----------------
    # param helpers
    # -----------------

    def _param(self, key: str) -> Any:
        if key not in self.params:
            raise InvalidConfiguration(
                f"Coupon {self.code} ({self.type_name}) is missing param '{key}'",
                {"code": self.code, "param": key},
            )
        return self.params[key]

    def _decimal_param(self, key: str, *, minimum: D = D("0")) -> D:
        value = to_decimal(self._param(key), f"{self.code}.{key}")
        if value < minimum:
            raise InvalidConfiguration(
                f"Coupon {self.code}: '{key}' must be >= {minimum}, got {value}",
                {"code": self.code, "param": key},
            )
        return value

    def _scope_param(self, *, allow_cart: bool) -> Optional[Product]:
        """Scope letter -> Product; None for the whole-cart scope."""
        scope = str(self._param("scope")).strip().upper()
        if scope == CART_SCOPE:
            if not allow_cart:
                raise InvalidConfiguration(
                    f"Coupon {self.code} ({self.type_name}) needs a product scope",
                    {"code": self.code},
                )
            return None
        return Product.from_scope_code(scope)


# Registry: coupon type -> Coupon class
coupon_registry: Dict[str, Type[Coupon]] = {}


def register(coupon_cls: Type[Coupon]) -> Type[Coupon]:
    """
    Decorator to register a coupon family by its type_name.
    Fails fast on duplicate registrations.
    """
    key = getattr(coupon_cls, "type_name", None)
    if not key or key == "base":
        raise ValueError(f"Coupon class {coupon_cls.__name__} has no type_name")

    if key in coupon_registry and coupon_registry[key] is not coupon_cls:
        raise ValueError(
            f"Duplicate coupon registration for type '{key}': "
            f"{coupon_registry[key].__name__} vs {coupon_cls.__name__}"
        )

    coupon_registry[key] = coupon_cls
    return coupon_cls
