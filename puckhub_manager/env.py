"""
Environment configuration

Uses Pydantic Settings to load deployment-specific values from environment
variables (or a ``.env`` file) with validation and type coercion. The Django
settings module reads :data:`env` once at import time.
"""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Django
    secret_key: SecretStr = SecretStr("dev-insecure-change-me")
    debug: bool = False
    allowed_hosts: list[str] = ["localhost", "127.0.0.1"]

    # Database (sqlite file path; ":memory:" is accepted for tests)
    sqlite_path: str = "db.sqlite3"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    service_name: str = "puckhub"

    # Recalculation
    recalc_on_save: bool = True
    team_form_limit: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PUCKHUB_",
        extra="ignore",
    )


env = EnvSettings()
