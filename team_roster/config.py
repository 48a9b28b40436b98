"""
Settings read from environment variables.
Values are captured when the module is first imported, so set env vars before that.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


def _default_cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Relative paths resolve against the project root (see persistence.db)
    database_path: str = os.environ.get("TEAM_ROSTER_DB_PATH", "data/team_roster.db")

    secret_key: str = os.environ.get("JWT_SECRET_KEY", "team-roster-dev-secret-change-in-production")
    algorithm: str = os.environ.get("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = _env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)

    log_level: str = os.environ.get("LOG_LEVEL", "INFO")
    log_file: str | None = os.environ.get("LOG_FILE") or None

    # Team store: memory id namespaces the map inside the DB file; sizes are UTF-8 bytes
    store_memory_id: int = _env_int("STORE_MEMORY_ID", 0)
    store_max_key_size: int = _env_int("STORE_MAX_KEY_SIZE", 440)
    store_max_value_size: int = _env_int("STORE_MAX_VALUE_SIZE", 65536)

    cors_origins: list[str] = field(default_factory=_default_cors_origins)


settings = Settings()
