"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from atat.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MAX_ISSUE_PAGES,
    DEFAULT_POLL_TIMEOUT_SECONDS,
    SLOW_DOWN_FALLBACK_INTERVAL_SECONDS,
)


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    ATAT_HOME: Path = Path.home() / ".atat"

    # OAuth device flow settings
    CLIENT_ID: str | None = None
    POLL_TIMEOUT: float = DEFAULT_POLL_TIMEOUT_SECONDS
    SLOW_DOWN_FALLBACK_INTERVAL: int = SLOW_DOWN_FALLBACK_INTERVAL_SECONDS

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL
    HTTP_TIMEOUT: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    MAX_ISSUE_PAGES: int = DEFAULT_MAX_ISSUE_PAGES
