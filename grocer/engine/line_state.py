from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from grocer.domain.models import Item, Product

D = Decimal


@dataclass
class LineState:
    # Input
    line_no: int
    product: Product
    qty: D

    # Snapshot from period
    unit_price: D = D("0")
    discount_fraction: D = D("0")

    # Computed
    subtotal: D = D("0")
    net: D = D("0")
    free_kg: D = D("0")

    @classmethod
    def from_item(cls, line_no: int, item: Item) -> "LineState":
        return cls(line_no=line_no, product=item.product, qty=item.quantity_kg)

    @property
    def effective_unit_price(self) -> D:
        """Unit price after the line's tier discount."""
        return self.unit_price * (D("1") - self.discount_fraction)

    @property
    def free_kg_left(self) -> D:
        return max(self.qty - self.free_kg, D("0"))

    @staticmethod
    def q(x: D) -> D:
        return x.quantize(D("0.01"))
