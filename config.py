# config.py
"""
Application settings, loaded from the environment and `.env` via Pydantic Settings.
File priority: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = Path(_env_file_from_env)
else:
    _candidate_specific = Path.cwd() / f".env.{os.getenv('APP_ENV', 'dev')}"
    _ENV_FILE_PATH = _candidate_specific if _candidate_specific.exists() else Path.cwd() / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    APP_NAME: str = "Fara'id Share Calculator"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = "sqlite:///./faraid.db"
    CORS_ORIGINS: list[str] = ["http://localhost", "http://localhost:3000"]
    # Digits kept after the decimal point in share amounts
    CURRENCY_DECIMALS: int = 2


def get_settings() -> Settings:
    return Settings()
