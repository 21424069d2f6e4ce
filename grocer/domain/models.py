from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from .errors import InvalidConfiguration

D = Decimal


def to_decimal(value: Any, what: str = "value") -> D:
    """Convert int/float/str/Decimal via str() so 0.85 stays 0.85. NaN and infinities are rejected."""
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{what} must be numeric, got bool")
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = D(str(value))
        except (InvalidOperation, ValueError, TypeError) as e:
            raise InvalidConfiguration(
                f"{what} is not a valid number: {value!r}", {"value": repr(value)}
            ) from e
    if not d.is_finite():
        raise InvalidConfiguration(f"{what} must be finite, got {value!r}", {"value": repr(value)})
    return d


# -----------------------------
# Catalog
# -----------------------------


class Product(str, Enum):
    APPLE = "APPLE"
    BANANA = "BANANA"

    @classmethod
    def from_scope_code(cls, code: str) -> "Product":
        """One-letter scope of product-scoped coupon codes (A-FREE1, B5)."""
        for product, scope in _SCOPE_CODES.items():
            if scope == code:
                return product
        raise InvalidConfiguration(f"Unknown product scope code: {code!r}")

    @classmethod
    def parse(cls, raw: Any) -> "Product":
        if isinstance(raw, Product):
            return raw
        try:
            return cls(str(raw).strip().upper())
        except ValueError as e:
            raise InvalidConfiguration(f"Unknown product: {raw!r}") from e


_SCOPE_CODES = {
    Product.APPLE: "A",
    Product.BANANA: "B",
}


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"


# -----------------------------
# Cart
# -----------------------------


@dataclass(frozen=True)
class Item:
    product: Product
    quantity_kg: D

    def __post_init__(self) -> None:
        qty = to_decimal(self.quantity_kg, "quantity_kg")
        if qty < 0:
            raise InvalidConfiguration(
                f"Item quantity must be >= 0 kg, got {qty}",
                {"product": str(self.product), "quantity_kg": str(qty)},
            )
        object.__setattr__(self, "product", Product.parse(self.product))
        object.__setattr__(self, "quantity_kg", qty)


@dataclass(frozen=True)
class Cart:
    """
    Ordered, immutable collection of items.
    Order has no effect on the price but keeps iteration deterministic.
    """

    items: Tuple[Item, ...] = ()

    def __init__(self, items: Iterable[Item] = ()):
        object.__setattr__(self, "items", tuple(items))

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def total_weight_kg(self) -> D:
        """Physical weight of all items; coupons never touch this."""
        total = D("0")
        for item in self.items:
            total += item.quantity_kg
        return total


# -----------------------------
# Result
# -----------------------------


@dataclass(frozen=True)
class CouponLine:
    """Outcome of one supplied coupon code, in application order."""

    code: str
    coupon_type: str
    decision: str  # "APPLIED" | "SKIPPED"
    delta: D
    total_after: D
    meta: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class PriceInfo:
    amount: D
    gift_bag_count: int
    gift_coupons: Tuple[str, ...] = ()
    breakdown: Tuple[str, ...] = field(default=(), compare=False)
    coupon_lines: Tuple[CouponLine, ...] = field(default=(), compare=False)
    payment_method: Optional[PaymentMethod] = None
