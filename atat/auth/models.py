"""Data models for the OAuth Device Authorization Grant."""

from dataclasses import dataclass
from typing import TypeAlias

from pydantic import BaseModel


class DeviceCodeSession(BaseModel):
    """Response of the device code endpoint, consumed once per login."""

    device_code: str
    user_code: str
    verification_uri: str
    expires_in: int
    interval: int


class AccessTokenResponse(BaseModel):
    """Response of the access token endpoint while polling."""

    access_token: str | None = None
    token_type: str | None = None
    scope: str | None = None
    error: str | None = None
    error_description: str | None = None
    interval: int | None = None


@dataclass(frozen=True)
class PollingSuccess:
    """The user authorized the device; polling is over."""

    token: str


@dataclass(frozen=True)
class PollingWait:
    """Authorization is still pending; poll again.

    `interval` is the new polling interval in seconds, or None to keep the current one.
    """

    interval: int | None = None


@dataclass(frozen=True)
class PollingFatal:
    """The provider reported an error that ends this login attempt."""

    message: str


PollingResult: TypeAlias = PollingSuccess | PollingWait | PollingFatal
