from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import jsonschema
import yaml

from grocer.core.logging_config import logger
from grocer.domain.errors import InvalidConfiguration, UnknownCouponCode

from .base import Coupon, coupon_registry

SCHEMAS = Path(__file__).resolve().parents[1] / "schemas"


# -----------------------
# Policy models
# -----------------------


@dataclass(frozen=True)
class CouponSpec:
    code: str
    type: str
    title: str
    provisional: bool = False
    params: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(code: str, d: Dict[str, Any]) -> "CouponSpec":
        return CouponSpec(
            code=str(code),
            type=str(d["type"]),
            title=str(d.get("title") or code),
            provisional=bool(d.get("provisional", False)),
            params=dict(d.get("params") or {}),
        )


@dataclass(frozen=True)
class CouponPolicy:
    """
    Accepted coupon codes and the typed coupon each one parses into.

    Every entry is instantiated once while loading, so bad params fail at
    load time and parse() only has to look codes up.
    """

    policy_version: str
    specs: Dict[str, CouponSpec]
    coupons: Dict[str, Coupon] = field(repr=False, compare=False, default_factory=dict)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CouponPolicy":
        if not isinstance(d, dict):
            raise InvalidConfiguration("Coupon policy must be a mapping")

        raw_coupons = d.get("coupons") or {}
        if not raw_coupons:
            raise InvalidConfiguration("Coupon policy must define at least one coupon")

        specs: Dict[str, CouponSpec] = {}
        coupons: Dict[str, Coupon] = {}
        for code, raw in raw_coupons.items():
            code = str(code).strip().upper()
            if code in specs:
                raise InvalidConfiguration(f"Duplicate coupon code in policy: {code}")
            spec = CouponSpec.from_dict(code, raw)

            coupon_cls = coupon_registry.get(spec.type)
            if coupon_cls is None:
                raise InvalidConfiguration(
                    f"Unknown coupon type for {code}: {spec.type}",
                    {"code": code, "type": spec.type},
                )

            specs[code] = spec
            coupons[code] = coupon_cls(code=code, title=spec.title, params=spec.params)

        return CouponPolicy(
            policy_version=str(d.get("policyVersion") or "v1"),
            specs=specs,
            coupons=coupons,
        )

    @property
    def codes(self) -> List[str]:
        return list(self.specs)

    def parse(self, code: str) -> Coupon:
        key = self._normalize(code)
        coupon = self.coupons.get(key)
        if coupon is None:
            raise UnknownCouponCode(
                f"Unknown coupon code: {code!r}",
                {"code": code, "policyVersion": self.policy_version},
            )
        return coupon

    def parse_all(self, codes: Iterable[str]) -> List[Coupon]:
        """Parse every code up front; the first unknown one aborts the call."""
        return [self.parse(c) for c in codes]

    @staticmethod
    def _normalize(code: Any) -> str:
        return str(code).strip().upper()


def load_coupon_policy(path: Optional[str | Path] = None) -> CouponPolicy:
    """Load the coupon policy from YAML, validated against its JSON schema."""
    if path is None:
        from grocer.core.settings import settings

        path = settings.coupon_policy_path

    policy_path = Path(path)
    try:
        with policy_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise InvalidConfiguration(f"Cannot read coupon policy {policy_path}: {e}") from e

    schema = json.loads((SCHEMAS / "coupon_policy.schema.json").read_text(encoding="utf-8"))
    try:
        jsonschema.validate(instance=raw, schema=schema)
    except jsonschema.ValidationError as e:
        raise InvalidConfiguration(
            f"Coupon policy {policy_path} is invalid: {e.message}",
            {"path": list(e.absolute_path)},
        ) from e

    policy = CouponPolicy.from_dict(raw)
    logger.info(
        "coupon_policy_loaded",
        path=str(policy_path),
        policy_version=policy.policy_version,
        coupons=len(policy.specs),
        provisional=sorted(c for c, s in policy.specs.items() if s.provisional),
    )
    return policy
