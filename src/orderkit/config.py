"""Application configuration via pydantic-settings.

Reads ORDERKIT_* environment variables and the .env file at project root.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# src/orderkit/config.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """Settings loaded from environment / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="ORDERKIT_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Pricing ---
    tax_rate: float = Field(default=0.13, ge=0)
    delivery_fee: float = Field(default=3.99, ge=0)
    free_delivery_threshold: float = Field(default=30.0, ge=0)

    # --- Cart ---
    # Merge cart lines whose toppings/sauces were picked in a different order.
    order_insensitive_identity: bool = False

    # --- Logging ---
    log_level: str = "INFO"
    log_to_file: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance (created once)."""
    return Settings()
