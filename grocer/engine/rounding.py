from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Any

from grocer.domain.errors import InvalidConfiguration
from grocer.domain.models import PaymentMethod, to_decimal

D = Decimal


def round_cash(amount: D) -> D:
    """
    Round to a multiple of 5 on the remainder below the next lower ten:
      r < 2.5        -> base
      2.5 <= r < 7.5 -> base + 5
      r >= 7.5       -> base + 10
    666.5 -> 665, 2.5 -> 5, 7.5 -> 10.
    """
    base = (amount / D("10")).to_integral_value(rounding=ROUND_FLOOR) * D("10")
    remainder = amount - base
    if remainder < D("2.5"):
        return base
    if remainder < D("7.5"):
        return base + D("5")
    return base + D("10")


def round_card(amount: D) -> D:
    """Nearest 0.1, half away from zero."""
    return amount.quantize(D("0.1"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class RoundingPolicy:
    """
    Payment-method specific rounding.
    card_bonus_pct is taken off card payments before rounding (0 = no bonus).
    """

    card_bonus_pct: D = D("0")

    def __post_init__(self) -> None:
        pct = to_decimal(self.card_bonus_pct, "card_bonus_pct")
        if not (D("0") <= pct < D("100")):
            raise InvalidConfiguration(f"card_bonus_pct must be in [0, 100), got {pct}")
        object.__setattr__(self, "card_bonus_pct", pct)

    @property
    def card_multiplier(self) -> D:
        return D("1") - self.card_bonus_pct / D("100")

    def apply(self, amount: Any, method: PaymentMethod) -> D:
        value = to_decimal(amount, "amount")
        method = PaymentMethod(method)
        if method == PaymentMethod.CASH:
            return round_cash(value)
        return round_card(value * self.card_multiplier)
