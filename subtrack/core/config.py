import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_LOG_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
}


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/subscriptions.db")).resolve()
        self.server_host = os.getenv("SERVER_HOST", "0.0.0.0")
        self.server_port = self._get_int("SERVER_PORT", default=8080)
        self.log_level = self._get_log_level("LOG_LEVEL", default="info")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_log_level(key: str, default: str) -> str:
        value = os.getenv(key, default).strip().lower()
        if value not in _LOG_LEVELS:
            raise RuntimeError(
                f"Invalid log level: {value} (must be debug, info, warn, or error)"
            )
        return _LOG_LEVELS[value]
