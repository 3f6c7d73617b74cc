"""Runtime settings loaded from the environment (.env for local dev)."""

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    database_url: str = "sqlite:///./calendar.db"
    app_timezone: str = "UTC"

    publication_lock_ttl_seconds: int = 40
    bulk_undo_window_seconds: int = 300
    cache_version_ttl_days: int = 7

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _env_list(name: str) -> list[str] | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    return [x.strip() for x in raw.split(",") if x.strip()]


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    values: dict = {}

    if os.getenv("DATABASE_URL"):
        values["database_url"] = os.getenv("DATABASE_URL")
    if os.getenv("APP_TIMEZONE"):
        values["app_timezone"] = os.getenv("APP_TIMEZONE")

    values["publication_lock_ttl_seconds"] = int(os.getenv("PUBLICATION_LOCK_TTL_SECONDS", "40"))
    values["bulk_undo_window_seconds"] = int(os.getenv("BULK_UNDO_WINDOW_SECONDS", "300"))
    values["cache_version_ttl_days"] = int(os.getenv("CACHE_VERSION_TTL_DAYS", "7"))

    origins = _env_list("CORS_ORIGINS")
    if origins:
        values["cors_origins"] = origins

    return Settings(**values)


@lru_cache
def get_settings() -> Settings:
    return load_settings()
