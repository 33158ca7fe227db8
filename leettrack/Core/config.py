from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Database
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./leettrack.db")
        self.db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
        self.db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
        self.db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "5"))
        # Auth (tokens are issued elsewhere, only verified here)
        self.jwt_secret: str = os.getenv("JWT_SECRET", "change-me")
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        # LeetCode source
        self.leetcode_graphql_url: str = os.getenv("LEETCODE_GRAPHQL_URL", "https://leetcode.com/graphql")
        self.leetcode_timeout_seconds: float = float(os.getenv("LEETCODE_TIMEOUT_SECONDS", "10"))
        # Sync
        self.sync_concurrency: int = max(1, int(os.getenv("SYNC_CONCURRENCY", "5")))
        self.sync_interval_seconds: int = int(os.getenv("SYNC_INTERVAL_SECONDS", str(24 * 60 * 60)))
        self.auto_sync_on_startup: bool = _env_bool("AUTO_SYNC_ON_STARTUP", "true")
        # Derived metrics
        self.active_day_threshold: int = int(os.getenv("ACTIVE_DAY_THRESHOLD", "5"))
        self.streak_lookback_days: int = int(os.getenv("STREAK_LOOKBACK_DAYS", "100"))
        self.leaderboard_size: int = int(os.getenv("LEADERBOARD_SIZE", "10"))
        self.cap_repeatable_badges_per_day: bool = _env_bool("CAP_REPEATABLE_BADGES_PER_DAY", "false")
        # App meta
        self.app_name: str = "LeetTrack"
        self.debug: bool = _env_bool("DEBUG", "False")
        self.allow_origins: str = os.getenv(
            "ALLOW_ORIGINS",
            "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
