"""Runtime configuration for the portfolio return service."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_YAHOO_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
# Yahoo throttles or blocks default client signatures; a curl user agent gets through.
DEFAULT_USER_AGENT = "curl/7.68.0"


class ModusSettings(BaseSettings):
    """Configuration options for the quote provider, engine and HTTP service."""

    app_name: str = Field(default="Modus Portfolio Returns")

    yahoo_base_url: str = Field(default=DEFAULT_YAHOO_BASE_URL)
    yahoo_user_agent: str = Field(default=DEFAULT_USER_AGENT)
    yahoo_events: str = Field(default="div|split|capitalGains")
    yahoo_interval: str = Field(default="1d")
    yahoo_timeout_seconds: float = Field(default=30.0, gt=0.0)

    montecarlo_simulations: int = Field(default=10000, gt=0)

    log_level: str = Field(default="INFO")

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="modus")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="MODUS_")

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"telemetry_otlp_endpoint"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def _cached_settings() -> ModusSettings:
    return ModusSettings()


def get_settings(**overrides: Any) -> ModusSettings:
    """Return cached settings, or a fresh instance when overrides are given."""

    if overrides:
        return ModusSettings(**overrides)
    return _cached_settings()


__all__ = [
    "DEFAULT_USER_AGENT",
    "DEFAULT_YAHOO_BASE_URL",
    "ModusSettings",
    "get_settings",
]
