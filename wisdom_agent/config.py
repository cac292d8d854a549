"""ABOUTME: Configuration helpers for the Wisdom Agent.
ABOUTME: Loads pricing, provider credentials and payment settings from environment."""

import logging
import math
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WISDOM_PRICE_USD = 0.01


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str = Field(..., description="Completion provider API key")
    openai_base_url: str = "https://api.openai.com/v1"
    completion_model: str = "gpt-4o-mini"

    wisdom_price_usd: float = DEFAULT_WISDOM_PRICE_USD
    wisdom_max_tokens: int = 150
    discourse_max_tokens: int = 500
    request_timeout_seconds: int = 60

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Passed through to the x402 middleware untouched.
    payments_enabled: bool = True
    payments_receivable_address: str = ""
    network: str = "base-sepolia"
    facilitator_url: str = "https://x402.org/facilitator"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("wisdom_price_usd", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> float:
        try:
            price = float(value)
        except (TypeError, ValueError):
            return DEFAULT_WISDOM_PRICE_USD
        if not (math.isfinite(price) and price > 0):
            return DEFAULT_WISDOM_PRICE_USD
        return price

    @property
    def discourse_price_usd(self) -> float:
        return self.wisdom_price_usd * 2

    @property
    def completions_url(self) -> str:
        return f"{self.openai_base_url.rstrip('/')}/chat/completions"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
