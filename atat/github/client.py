# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy

from atat.synchronize.exceptions import AuthenticationRequiredError
from atat.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_HTTP_TIMEOUT_SECONDS, USER_AGENT

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy] | GitHub[UnauthAuthStrategy]


async def get_github_client(
    token: str | None,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    allow_anonymous: bool = False,
) -> GitHubClient:
    """Returns a GitHub client authenticated with the device-flow access token.

    Without a token, an unauthenticated client is returned when `allow_anonymous`
    is set; otherwise AuthenticationRequiredError is raised.
    """
    if not token:
        if not allow_anonymous:
            raise AuthenticationRequiredError()
        # Disable HTTP caching to always get fresh data
        return GitHub(UnauthAuthStrategy(), base_url=github_api_url, user_agent=USER_AGENT, timeout=timeout, http_cache=False)
    return GitHub(
        auth=TokenAuthStrategy(token),
        base_url=github_api_url,
        user_agent=USER_AGENT,
        timeout=timeout,
        http_cache=False,
    )
