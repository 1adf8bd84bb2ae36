"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    landclaim_env: str = "development"
    landclaim_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Run each API session's collision check on a background thread
    collision_auto_schedule: bool = False

    # Sessions untouched this long are stopped and dropped
    session_idle_timeout_seconds: float = 900.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
