from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Tuple

import jsonschema
import yaml

from grocer.domain.errors import InvalidConfiguration, UnconfiguredProduct
from grocer.domain.models import Product, to_decimal

D = Decimal

SCHEMAS = Path(__file__).resolve().parents[1] / "schemas"


@dataclass(frozen=True)
class DiscountTier:
    threshold_kg: D
    fraction: D


class Period:
    """
    Named pricing configuration: unit price per kg and quantity tiers per product.

    Configure with set_unit_price / set_discount, then freeze. Once frozen the
    period is read-only and may be shared by concurrent pricing calls; any
    further set_* call raises InvalidConfiguration.
    """

    def __init__(self, name: str):
        self.name = str(name)
        self._unit_prices: Dict[Product, D] = {}
        self._tiers: Dict[Product, List[DiscountTier]] = {}
        self._frozen = False

    def __repr__(self) -> str:
        return f"Period(name={self.name!r}, products={sorted(p.value for p in self._unit_prices)})"

    # -----------------
    # configuration
    # -----------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "Period":
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise InvalidConfiguration(
                f"Period '{self.name}' is frozen; configure it before the first pricing call",
                {"period": self.name},
            )

    def set_unit_price(self, product: Product, price: Any) -> None:
        self._check_mutable()
        product = Product.parse(product)
        p = to_decimal(price, "unit price")
        if p < 0:
            raise InvalidConfiguration(
                f"Unit price for {product.value} must be >= 0, got {p}",
                {"period": self.name, "product": product.value},
            )
        self._unit_prices[product] = p

    def set_discount(self, product: Product, threshold_kg: Any, fraction: Any) -> None:
        self._check_mutable()
        product = Product.parse(product)
        threshold = to_decimal(threshold_kg, "discount threshold")
        frac = to_decimal(fraction, "discount fraction")

        meta = {"period": self.name, "product": product.value, "thresholdKg": str(threshold)}
        if threshold < 0:
            raise InvalidConfiguration(f"Discount threshold must be >= 0 kg, got {threshold}", meta)
        if not (D("0") <= frac < D("1")):
            raise InvalidConfiguration(f"Discount fraction must be in [0, 1), got {frac}", meta)

        tiers = self._tiers.setdefault(product, [])
        # thresholds must arrive strictly increasing
        if tiers and threshold <= tiers[-1].threshold_kg:
            raise InvalidConfiguration(
                f"Discount threshold {threshold} kg for {product.value} must be above "
                f"{tiers[-1].threshold_kg} kg",
                meta,
            )
        tiers.append(DiscountTier(threshold, frac))

    # -----------------
    # queries
    # -----------------

    def unit_price(self, product: Product) -> D:
        product = Product.parse(product)
        try:
            return self._unit_prices[product]
        except KeyError:
            raise UnconfiguredProduct(
                f"No unit price for {product.value} in period '{self.name}'",
                {"period": self.name, "product": product.value},
            ) from None

    def tiers(self, product: Product) -> Tuple[DiscountTier, ...]:
        return tuple(self._tiers.get(Product.parse(product), ()))

    def discount_fraction(self, product: Product, quantity_kg: Any) -> D:
        """
        Fraction of the highest threshold not exceeding quantity_kg.
        Flat on the whole line; 0 below every threshold.
        """
        qty = to_decimal(quantity_kg, "quantity_kg")
        best = D("0")
        for tier in self.tiers(product):
            if tier.threshold_kg > qty:
                break
            best = tier.fraction
        return best

    # -----------------
    # loading
    # -----------------

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Period":
        """
        raw:
          name: Normal
          unitPrices: {APPLE: 500, BANANA: 450}
          discounts:
            APPLE:
              - {minKg: 5, fraction: 0.1}
              - {minKg: 20, fraction: 0.15}
        """
        if not isinstance(raw, dict):
            raise InvalidConfiguration("Period config must be a mapping")

        period = cls(str(raw.get("name") or "default"))
        for product, price in (raw.get("unitPrices") or {}).items():
            period.set_unit_price(Product.parse(product), price)

        for product, tiers in (raw.get("discounts") or {}).items():
            for t in tiers or []:
                try:
                    period.set_discount(Product.parse(product), t["minKg"], t["fraction"])
                except (KeyError, TypeError) as e:
                    raise InvalidConfiguration(
                        f"Discount tier for {product} needs minKg and fraction: {t!r}"
                    ) from e
        return period


def load_period(path: str | Path) -> Period:
    """Load a period from YAML, validated against schemas/period.schema.json."""
    period_path = Path(path)
    try:
        with period_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise InvalidConfiguration(f"Cannot read period file {period_path}: {e}") from e

    schema = json.loads((SCHEMAS / "period.schema.json").read_text(encoding="utf-8"))
    try:
        jsonschema.validate(instance=raw, schema=schema)
    except jsonschema.ValidationError as e:
        raise InvalidConfiguration(
            f"Period file {period_path} is invalid: {e.message}",
            {"path": list(e.absolute_path)},
        ) from e

    return Period.from_dict(raw)
