"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_snapshot_dir() -> Path:
    """Return the default directory for static fallback snapshots."""
    return Path.cwd() / "fallback_snapshots"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Account Performance Dashboard"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Brokerage API (credentials are the one hard requirement)
    broker_base_url: str = "https://paper-api.alpaca.markets"
    broker_api_key: Optional[str] = None
    broker_secret_key: Optional[str] = None

    # Market data API
    market_data_base_url: str = "https://www.alphavantage.co"
    market_data_api_key: Optional[str] = None

    # External reasoning feed (disabled when unset)
    reasoning_feed_url: Optional[str] = None

    # Static fallback snapshots and order corrections live here
    fallback_snapshot_dir: Optional[Path] = None

    # Cache freshness per key class
    account_cache_ttl_seconds: int = 5 * 60
    market_data_cache_ttl_seconds: int = 7 * 24 * 60 * 60

    # Reconstruction and series hygiene
    starting_cash: float = 100000.0
    equity_trust_floor: float = 1000.0
    staleness_threshold_hours: int = 6
    staleness_fill_cap_hours: int = 72

    benchmark_symbols: tuple[str, ...] = ("SPY", "QQQ")
    order_fetch_limit: int = 500
    activity_order_limit: int = 100

    # Background refresh
    refresh_interval_seconds: int = 5 * 60
    auto_refresh_enabled: bool = True

    def get_snapshot_dir(self) -> Path:
        """Get the fallback snapshot directory (not created if missing)."""
        return self.fallback_snapshot_dir or get_default_snapshot_dir()


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
