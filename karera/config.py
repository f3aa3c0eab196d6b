"""Application configuration using Pydantic settings."""

import time
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

MANILA_TZ = ZoneInfo("Asia/Manila")


def manila_now() -> datetime:
    """Current time in Manila."""
    return datetime.now(MANILA_TZ)


def manila_now_naive() -> datetime:
    """Current Manila time as naive datetime (for SQLAlchemy defaults).

    SQLite doesn't handle timezone-aware datetimes well, so rows store
    Manila local time without tzinfo.
    """
    return manila_now().replace(tzinfo=None)


def now_ms() -> int:
    """Wall-clock milliseconds since the epoch, used to stamp bets."""
    return int(time.time() * 1000)

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KARERA_",
        extra="ignore",
    )

    # Database
    db_path: Path = Path("./data/karera.db")

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Race administration
    owner: str = "admin"
    min_bets: int = 0
    enforce_balances: bool = False

    @property
    def database_url(self) -> str:
        """SQLite database URL for SQLAlchemy."""
        return f"sqlite+aiosqlite:///{self.db_path}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()
