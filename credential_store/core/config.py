import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/credentials.db")).resolve()
        self.full_access_api_key = self._get("FULL_ACCESS_API_KEY")
        self.read_only_api_key = self._get("READ_ONLY_API_KEY")
        if self.full_access_api_key == self.read_only_api_key:
            raise RuntimeError("FULL_ACCESS_API_KEY and READ_ONLY_API_KEY must differ")
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        if not 4 <= self.bcrypt_rounds <= 31:
            raise RuntimeError("Environment variable BCRYPT_ROUNDS must be between 4 and 31")
        self.audit_page_size = self._get_int("AUDIT_PAGE_SIZE", default=100)
        if self.audit_page_size < 1:
            raise RuntimeError("Environment variable AUDIT_PAGE_SIZE must be positive")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return value

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
