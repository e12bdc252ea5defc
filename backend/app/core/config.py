"""Application configuration using Pydantic Settings."""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Upstream connectivity
    eth_rpc_url: str = Field(default="http://localhost:8545")
    kraken_base_url: str = Field(default="https://api.kraken.com")
    http_timeout_seconds: float = Field(default=10.0)

    # Oracle policy
    oracle_timeout_seconds: int = Field(default=86400, gt=0)

    # Default policy (overridable per asset)
    default_threshold: Decimal = Field(default=Decimal("0.05"), ge=0, le=1)
    delay_until_default_seconds: int = Field(default=86400, ge=0)
    default_max_trade_volume: Decimal = Field(default=Decimal("1000000"), ge=0)

    # Refresh loop
    refresh_interval_seconds: int = Field(default=30, gt=0)

    # Events
    event_log_size: int = Field(default=1000, gt=0)

    # Assets and rewards
    assets_config_path: Optional[str] = Field(default=None)
    claim_holder_address: str = Field(default="")

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
