"""
Workbench configuration — all environment variables in one place.

Read from environment at runtime.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Remote compile service
    COMPILE_SERVICE_URL: str = os.environ.get("COMPILE_SERVICE_URL", "http://localhost:3000")
    MOBILE_COMPILE_PATH: str = os.environ.get("MOBILE_COMPILE_PATH", "/compile")
    BACKEND_COMPILE_PATH: str = os.environ.get("BACKEND_COMPILE_PATH", "/compile-backend")
    COMPILE_TIMEOUT_SECONDS: float = float(os.environ.get("COMPILE_TIMEOUT_SECONDS", "120"))

    # Real-time log channel
    LOG_STREAM_URL: str = os.environ.get("LOG_STREAM_URL", "ws://localhost:3001")
    LOG_HISTORY_LIMIT: int = int(os.environ.get("LOG_HISTORY_LIMIT", "500"))

    # Editor
    EDITOR_DEBOUNCE_MS: int = int(os.environ.get("EDITOR_DEBOUNCE_MS", "500"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def EDITOR_DEBOUNCE_SECONDS(self) -> float:
        return self.EDITOR_DEBOUNCE_MS / 1000


# Singleton instance
settings = Settings()

if not settings.COMPILE_SERVICE_URL.startswith(("http://", "https://")):
    raise RuntimeError("COMPILE_SERVICE_URL must be an http(s) URL")
if not settings.LOG_STREAM_URL.startswith(("ws://", "wss://")):
    raise RuntimeError("LOG_STREAM_URL must be a ws(s) URL")
if settings.LOG_HISTORY_LIMIT <= 0:
    raise RuntimeError("LOG_HISTORY_LIMIT must be positive")
if settings.EDITOR_DEBOUNCE_MS < 0:
    raise RuntimeError("EDITOR_DEBOUNCE_MS must not be negative")
