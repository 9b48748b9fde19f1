"""
Configuration settings for the quiz server.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a ``QUIZ_`` prefixed variable, e.g.
``QUIZ_PORT=4000``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///quizzes.sqlite",
        description="Quiz store connection string (converted to an async driver)",
    )
    seed_on_init: bool = Field(
        default=True,
        description="Insert the default quizzes when the table is empty",
    )

    # ========================================
    # Socket Server
    # ========================================
    host: str = Field(
        default="127.0.0.1",
        description="Interface the quiz server listens on",
    )
    port: int = Field(
        default=3030,
        description="TCP port the quiz server listens on",
    )

    # ========================================
    # Session Presentation
    # ========================================
    prompt: str = Field(
        default="quiz > ",
        description="Prompt marker shown when a session awaits a command",
    )
    ansi_colors: bool = Field(
        default=True,
        description="Emit ANSI colors to clients (plain text when disabled)",
    )
    terminal_prefill: bool = Field(
        default=False,
        description="Pre-fill edit prompts with the current values",
    )
    banner_font: str = Field(
        default="standard",
        description="Figlet font used for large banners",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/quiz_server.log",
        description="Log file path (None for stderr only)",
    )

    def get_server_address(self) -> tuple[str, int]:
        """Return the (host, port) pair the server binds to."""
        return self.host, self.port


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
