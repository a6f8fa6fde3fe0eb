"""
Site builder configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
The engine never reads the environment; routes hand it CompileOptions.
"""

from __future__ import annotations

import os

from engine.compiler.types import CompileOptions


def _int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    """Application settings from environment variables."""

    # R2 / S3 Storage
    R2_ENDPOINT: str = os.environ.get("R2_ENDPOINT", "")
    R2_ACCESS_KEY: str = os.environ.get("R2_ACCESS_KEY", "")
    R2_SECRET_KEY: str = os.environ.get("R2_SECRET_KEY", "")
    R2_PUBLISHED_BUCKET: str = os.environ.get("R2_PUBLISHED_BUCKET", "sites-published")

    # Compiler
    COMPILE_MAX_WORKERS: int = _int("COMPILE_MAX_WORKERS", 4)

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    @property
    def PUBLIC_URL(self) -> str:
        url = os.environ.get("PUBLIC_URL")
        if url:
            return url.rstrip("/")
        return "http://localhost:8000" if self.ENVIRONMENT == "development" else "https://sites.example.com"

    @property
    def API_BASE_URL(self) -> str:
        return (os.environ.get("API_BASE_URL") or self.PUBLIC_URL).rstrip("/")

    def compile_options(self) -> CompileOptions:
        """CompileOptions for the running service."""
        return CompileOptions(
            base_url=self.PUBLIC_URL,
            api_base_url=self.API_BASE_URL,
            max_workers=max(1, self.COMPILE_MAX_WORKERS),
        )


# Singleton instance
settings = Settings()
