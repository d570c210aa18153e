"""Environment settings."""

import os
from typing import Optional


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not set

        Returns:
            str: Environment variable value
        """
        value = os.getenv(key, default)
        return value or ""

    @staticmethod
    def bucket_name() -> str:
        return Settings.get("BUCKET_NAME")

    @staticmethod
    def log_level() -> str:
        return Settings.get("LOG_LEVEL", "INFO")

    @staticmethod
    def probe_timeout_ms() -> Optional[int]:
        value = Settings.get("CANARY_PROBE_TIMEOUT_MS")
        return int(value) if value else None
