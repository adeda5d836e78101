"""HTTP transport for the GitHub device flow endpoints."""

from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from atat.auth.device_flow import create_access_token_request
from atat.auth.models import AccessTokenResponse, DeviceCodeSession
from atat.github.exceptions import GitHubRequestError, MalformedResponseError
from atat.utils.constants import ACCESS_TOKEN_URL, DEFAULT_HTTP_TIMEOUT_SECONDS, DEVICE_CODE_URL, USER_AGENT

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class DeviceFlowTransport:
    """Issues the device code and access token requests of the device flow."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        device_code_url: str = DEVICE_CODE_URL,
        access_token_url: str = ACCESS_TOKEN_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the transport, creating an httpx client unless one is given."""
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.device_code_url = device_code_url
        self.access_token_url = access_token_url

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "DeviceFlowTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _post(self, operation: str, url: str, params: dict[str, str], model: type[ModelT]) -> ModelT:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        try:
            response = await self.client.post(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Device flow request could not be sent", operation=operation, error=str(exc))
            raise GitHubRequestError(operation, None, str(exc)) from exc
        if not response.is_success:
            logger.error("Device flow request failed", operation=operation, status_code=response.status_code)
            raise GitHubRequestError(operation, response.status_code)
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise MalformedResponseError(f"Unexpected response while trying to {operation}: {exc}") from exc

    async def request_device_code(self, client_id: str) -> DeviceCodeSession:
        """Start a device flow session for `client_id`."""
        session = await self._post("get device code", self.device_code_url, {"client_id": client_id}, DeviceCodeSession)
        logger.info("Received device code", verification_uri=session.verification_uri, expires_in=session.expires_in, interval=session.interval)
        return session

    async def poll_access_token(self, client_id: str, device_code: str) -> AccessTokenResponse:
        """Ask once whether the user has authorized the device."""
        params = create_access_token_request(client_id, device_code)
        return await self._post("poll for access token", self.access_token_url, params, AccessTokenResponse)
