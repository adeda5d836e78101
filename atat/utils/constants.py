"""Shared constants used across the application."""

# GitHub Endpoints
# ----------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default REST API base URL."""

DEVICE_CODE_URL = "https://github.com/login/device/code"
"""Endpoint issuing device and user codes for the Device Authorization Grant."""

ACCESS_TOKEN_URL = "https://github.com/login/oauth/access_token"
"""Endpoint polled for the access token during the Device Authorization Grant."""

DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"
"""OAuth grant type sent while polling for the access token."""

USER_AGENT = "atat-cli"
"""User-Agent header sent with every request."""

# Device Flow Defaults
# --------------------

DEFAULT_POLL_TIMEOUT_SECONDS = 5 * 60
"""Wall-clock limit for waiting on the user to authorize the device."""

SLOW_DOWN_FALLBACK_INTERVAL_SECONDS = 5
"""Polling interval applied after `slow_down` when the server sends no interval."""

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
"""Timeout applied to individual HTTP requests."""

# Issue Listing
# -------------

ISSUES_PER_PAGE = 100
"""Page size requested when listing repository issues."""

DEFAULT_MAX_ISSUE_PAGES = 3
"""Upper bound on the number of issue pages fetched per command."""

# Local Files
# -----------

TODO_FILENAME = "TODO.md"
"""Checklist file synchronized with GitHub, relative to the working directory."""

PROJECT_CONFIG_DIR = ".atat"
"""Directory holding project-specific configuration."""

PROJECT_CONFIG_FILENAME = "config.json"
"""Project configuration file inside PROJECT_CONFIG_DIR."""

TOKEN_FILENAME = "token"
"""File inside the atat home directory holding the access token."""
