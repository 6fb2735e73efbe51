from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_PREFERENCES_PATH = Path.home() / ".ops_console_preferences.json"


class ConsoleSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPS_BASE_URL: str = DEFAULT_BASE_URL
    OPS_TIMEOUT_SECONDS: float = 30.0
    OPS_VERIFY_SSL: bool = True
    OPS_RETRY_MAX_ATTEMPTS: int = 3
    OPS_RETRY_BACKOFF_MS: int = 150
    OPS_PAGE_SIZE: int = 50
    OPS_CURRENCY_SYMBOL: str = "₱"
    OPS_PREFERENCES_PATH: str = str(DEFAULT_PREFERENCES_PATH)
    OPS_PREFERENCES_BACKEND: Literal["file", "remote", "memory"] = "file"
    OPS_ACCESS_TOKEN: str | None = None
    OPS_LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("OPS_LOG_LEVEL", mode="before")
    @classmethod
    def _log_level_upper(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("OPS_BASE_URL")
    @classmethod
    def _base_url_not_empty(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("OPS_BASE_URL cannot be empty")
        return normalized.rstrip("/")

    @field_validator("OPS_TIMEOUT_SECONDS")
    @classmethod
    def _timeout_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("OPS_TIMEOUT_SECONDS must be greater than 0")
        return value

    @field_validator("OPS_RETRY_MAX_ATTEMPTS")
    @classmethod
    def _retry_attempts_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("OPS_RETRY_MAX_ATTEMPTS must be >= 1")
        return value

    @field_validator("OPS_RETRY_BACKOFF_MS")
    @classmethod
    def _backoff_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("OPS_RETRY_BACKOFF_MS must be >= 0")
        return value

    @field_validator("OPS_PAGE_SIZE")
    @classmethod
    def _page_size_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("OPS_PAGE_SIZE must be >= 1")
        return value

    @property
    def preferences_path(self) -> Path:
        return Path(self.OPS_PREFERENCES_PATH).expanduser()
