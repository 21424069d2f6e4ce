# grocer/core/settings.py
from decimal import Decimal
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    # --- Rounding ---
    # Card bonus in percent. Previous revision granted 0.5%, current one none.
    card_bonus_pct: Decimal = Decimal("0")

    # --- Rewards ---
    gift_bag_step_kg: Decimal = Decimal("5")
    gift_coupon_threshold: Decimal = Decimal("20000")

    # --- Coupons ---
    coupon_policy_path: str = str(PACKAGE_ROOT / "rules" / "coupon_policy.yaml")

    # --- Logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GROCER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # reads GROCER_* env vars and .env
