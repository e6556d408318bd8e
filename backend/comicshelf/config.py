"""
ComicShelf Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, routes and the entry point.
When:  Loaded once at module import time.

Environment variables (case-insensitive):
    ARCHIVE_PATH        Path to the .7z or .zip strip archive
    HOST / PORT         Bind address for `python -m comicshelf`
    LOG_LEVEL           DEBUG, INFO, WARNING, ERROR, CRITICAL
    CORS_ORIGINS        Comma-separated list of allowed origins
    STREAM_CHUNK_SIZE   Bytes per chunk when streaming an image
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for running next to the archive
    in the current working directory.
    """

    # ── Archive ───────────────────────────────────────────────────────────
    # What: The compressed archive holding <year>/<YYYY-MM-DD>.<ext> images
    # Format: selected by suffix (.7z via py7zr, .zip via zipfile)
    archive_path: str = Field(
        default="Dilbert_1989-2023_complete.7z",
        description="Path to the comic strip archive",
    )

    # What: Read size used when copying an archive entry into the response
    # Trade-off: Larger chunks = fewer threadpool hops, more memory per request
    stream_chunk_size: int = Field(default=64 * 1024, ge=1024, le=4 * 1024 * 1024)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


settings = Settings()
