from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Bank Ledger API"
    database_url: str = "sqlite:///bank_ledger.db"
    log_level: str = "INFO"
    # Session slot shared by every request that does not send X-Caller-Id.
    default_caller_id: str = "anonymous"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BANK_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
