from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from grocer.domain.models import Cart, Product
from grocer.explain.breakdown_builder import Breakdown

from .line_state import LineState
from .period import Period

D = Decimal


@dataclass
class PricingContext:
    """
    Execution context of one pricing call (stateless outside this object).

    - input: cart, period
    - lines: per-line state built by the discount step
    - total: running total, never negative
    - breakdown: explain trail
    """

    cart: Cart
    period: Period
    lines: List[LineState] = field(default_factory=list)
    total: D = D("0")
    breakdown: Breakdown = field(default_factory=Breakdown)

    def lines_for(self, product: Optional[Product]) -> List[LineState]:
        """Lines of one product in cart order; None means every line."""
        if product is None:
            return list(self.lines)
        return [ls for ls in self.lines if ls.product == product]

    def recompute_total(self) -> D:
        total = D("0")
        for ls in self.lines:
            total += ls.net
        self.total = total
        return total

    def deduct(self, amount: D, lines: Iterable[LineState] = ()) -> D:
        """
        Subtract up to `amount` from the running total and return what was
        actually taken. With `lines`, the deduction is also charged against
        those lines in order and is bounded by what they still carry.
        """
        wanted = max(min(amount, self.total), D("0"))
        taken = D("0")

        scoped = list(lines)
        if scoped:
            for ls in scoped:
                if taken >= wanted:
                    break
                part = min(ls.net, wanted - taken)
                ls.net -= part
                taken += part
        else:
            taken = wanted

        self.total -= taken
        return taken
