"""Marketplace configuration via pydantic-settings.

Reads from .env file or environment variables. The commission rate is
validated here so a bad deployment fails at startup rather than on the
first sale.

Usage:
    from escrow_marketplace.config import get_settings
    settings = get_settings()
    print(settings.commission_rate)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the escrow marketplace."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_env: Literal["development", "staging", "production"] = "development"
    app_log_level: str = "DEBUG"

    # --- Fee Policy ---
    commission_rate: int = Field(
        default=2,
        ge=0,
        le=100,
        description="Platform cut of every sale, in integer percent",
    )

    # --- Accounts ---
    operator_account: str = "operator"
    engine_account: str = "escrow-engine"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the marketplace settings."""
    return Settings()
