"""
Configuration helpers for the accounts backend.

Routers and services read settings through `get_settings()` instead of
fetching os.environ directly, so tests can swap env vars and clear the cache.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    stripe_secret_key: str
    stripe_webhook_secret: str
    webhook_tolerance_seconds: int
    port: int
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip() for item in value.split(",") if item.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./accounts.db"),
        stripe_secret_key=os.getenv("STRIPE_SECRET_KEY", ""),
        stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET", ""),
        webhook_tolerance_seconds=_int(os.getenv("WEBHOOK_TOLERANCE_SECONDS", "300"), 300),
        port=_int(os.getenv("PORT", "5000"), 5000),
        cors_origins=_list(os.getenv("CORS_ORIGINS", "*")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
