"""Polling state machine for the OAuth Device Authorization Grant."""

import asyncio
import time
from typing import Awaitable, Callable

import structlog

from atat.auth.exceptions import DeviceFlowError, DeviceFlowTimeoutError
from atat.auth.models import AccessTokenResponse, DeviceCodeSession, PollingFatal, PollingResult, PollingSuccess, PollingWait
from atat.utils.constants import DEVICE_CODE_GRANT_TYPE, SLOW_DOWN_FALLBACK_INTERVAL_SECONDS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TokenPoller = Callable[[str, str], Awaitable[AccessTokenResponse]]
"""Capability issuing one access token request: (client_id, device_code) -> response."""

Sleeper = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


def create_access_token_request(client_id: str, device_code: str) -> dict[str, str]:
    """Build the parameters of one access token poll."""
    return {
        "client_id": client_id,
        "device_code": device_code,
        "grant_type": DEVICE_CODE_GRANT_TYPE,
    }


def handle_polling_response(
    response: AccessTokenResponse,
    slow_down_fallback: int = SLOW_DOWN_FALLBACK_INTERVAL_SECONDS,
) -> PollingResult:
    """Classify one poll response.

    A token ends polling successfully. `authorization_pending` keeps the current
    interval and `slow_down` switches to the interval sent by the server, or to
    `slow_down_fallback` seconds when the server sends none. Any other error, or a
    response carrying neither token nor error, is fatal.
    """
    if response.access_token:
        return PollingSuccess(response.access_token)

    if response.error:
        if response.error == "authorization_pending":
            return PollingWait(None)
        elif response.error == "slow_down":
            if response.interval is not None:
                return PollingWait(response.interval)
            return PollingWait(slow_down_fallback)
        elif response.error == "expired_token":
            return PollingFatal("device code has expired; re-authenticate")
        elif response.error == "access_denied":
            return PollingFatal("login cancelled by user")
        else:
            return PollingFatal(f"unknown error: {response.error}")

    return PollingFatal("invalid response from provider")


class DeviceFlowAuthenticator:
    """Exchanges a device code for an access token by polling the provider."""

    def __init__(
        self,
        client_id: str,
        poll: TokenPoller,
        sleep: Sleeper = asyncio.sleep,
        clock: Clock = time.monotonic,
        slow_down_fallback: int = SLOW_DOWN_FALLBACK_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the authenticator with its client ID and injected I/O capabilities."""
        self.client_id = client_id
        self.poll = poll
        self.sleep = sleep
        self.clock = clock
        self.slow_down_fallback = slow_down_fallback
        self.interval = 0

    async def poll_for_token(self, session: DeviceCodeSession, timeout: float) -> str:
        """Poll until the user authorizes the device and return the access token.

        The deadline is checked before every request, measured from the start of
        this call.

        Raises:
            DeviceFlowTimeoutError: If `timeout` seconds elapse before a token arrives.
            DeviceFlowError: If the provider reports a terminal error.
        """
        start_time = self.clock()
        self.interval = session.interval
        attempt = 0
        while True:
            elapsed = self.clock() - start_time
            if elapsed > timeout:
                logger.warning("Timed out waiting for device authorization", elapsed=round(elapsed, 2), timeout=timeout)
                raise DeviceFlowTimeoutError(elapsed, timeout)

            attempt += 1
            response = await self.poll(self.client_id, session.device_code)
            result = handle_polling_response(response, self.slow_down_fallback)
            if isinstance(result, PollingSuccess):
                logger.info("Device authorized", attempts=attempt, duration=round(self.clock() - start_time, 2))
                return result.token
            elif isinstance(result, PollingFatal):
                logger.error("Device authorization failed", attempt=attempt, error=response.error, message=result.message)
                raise DeviceFlowError(result.message)
            elif result.interval is not None:
                logger.info("Provider asked to slow down", attempt=attempt, previous_interval=self.interval, interval=result.interval)
                self.interval = result.interval
            else:
                logger.debug("Authorization pending", attempt=attempt, interval=self.interval)

            await self.sleep(self.interval)
