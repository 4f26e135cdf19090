"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Nothing here is secret (the allowance bank has no authentication),
but keeping deployment details (database URL, CORS origins) out of source code
means the same build runs locally and in production.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from allowance_bank.config import settings
    print(settings.DATABASE_URL)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Allowance Bank API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Allowance Bank"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    # SQLite by default; any async SQLAlchemy URL works (e.g. postgresql+asyncpg://...)
    DATABASE_URL: str = "sqlite+aiosqlite:///./allowance_bank.db"

    # --- API ---
    API_PREFIX: str = "/api"

    # --- Balance ---
    # Only used when the balance row is missing at startup
    INITIAL_BALANCE_CENTS: int = 0

    # --- Spending ---
    DEFAULT_SPEND_DESCRIPTION: str = "Spent money"
    # True: balance decrement and ledger row commit together.
    # False: balance commits first; a failed ledger insert is logged, not raised.
    ATOMIC_SPEND: bool = True

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["*"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
