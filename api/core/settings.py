"""
Environment-driven settings.

All values are read lazily so tests can set environment variables before the
first call.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_list(name: str, default: tuple[str, ...]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def pool_min_size() -> int:
    return max(env_int("DB_POOL_MIN_SIZE", 1), 0)


def pool_max_size() -> int:
    # The ceiling on concurrent checkouts; callers beyond it wait.
    return max(env_int("DB_POOL_MAX_SIZE", 10), 1)


def command_timeout() -> int:
    return env_int("DB_COMMAND_TIMEOUT", 30)


def cors_origins() -> list[str]:
    return env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def host() -> str:
    return env_str("HOST", "127.0.0.1")


def port() -> int:
    return env_int("PORT", 3000)
