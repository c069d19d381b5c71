"""
Webitor configuration: all environment variables in one place.

Read from environment at import time. Components take a Settings
instance so tests can pass their own.
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


class Settings:
    """Engine settings from environment variables."""

    # Content loading
    BASE_URL: str = os.environ.get("WEBITOR_BASE_URL", "http://localhost:8000")
    FETCH_TIMEOUT: float | None = _env_float("WEBITOR_FETCH_TIMEOUT")  # None = wait forever
    CACHE_BUST: bool = _env_bool("WEBITOR_CACHE_BUST", True)

    # Logging
    LOG_LEVEL: str = os.environ.get("WEBITOR_LOG_LEVEL", "INFO").upper()

    def __init__(self, **overrides: object) -> None:
        for name, value in overrides.items():
            if not hasattr(type(self), name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self, name, value)


# Singleton instance
settings = Settings()
