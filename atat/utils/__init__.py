"""Utility modules for shared functionality."""

from .constants import (
    ACCESS_TOKEN_URL,
    DEFAULT_GITHUB_API_URL,
    DEVICE_CODE_GRANT_TYPE,
    DEVICE_CODE_URL,
    TODO_FILENAME,
)
from .logging import configure_logging

__all__ = [
    "ACCESS_TOKEN_URL",
    "DEFAULT_GITHUB_API_URL",
    "DEVICE_CODE_GRANT_TYPE",
    "DEVICE_CODE_URL",
    "TODO_FILENAME",
    "configure_logging",
]
