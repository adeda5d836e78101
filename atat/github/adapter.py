"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestError, RequestFailed, RequestTimeout
from githubkit.versions.latest.models import Issue

from atat.github.abc import GitHubClientBase
from atat.github.exceptions import GitHubRequestError, MalformedResponseError
from atat.github.issues import GitHubIssue, fetch_github_issues
from atat.github.users import extract_login_from_user_response
from atat.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_MAX_ISSUE_PAGES, ISSUES_PER_PAGE
from atat.utils.github import split_repository

from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _error_message(exc: RequestFailed) -> str | None:
    try:
        error_data = exc.response.json()
    except ValueError:
        return None
    if isinstance(error_data, dict):
        message = error_data.get("message")
        return message if isinstance(message, str) else None
    return None


def raise_github_request_error(operation: str) -> Callable[[F], F]:
    """Decorator converting githubkit failures into GitHubRequestError, logging the HTTP status."""

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except RequestFailed as exc:
                status_code = exc.response.status_code
                message = _error_message(exc)
                logger.error(
                    "GitHub request failed",
                    function=func.__name__,
                    operation=operation,
                    status_code=status_code,
                    message=message,
                )
                raise GitHubRequestError(operation, status_code, message) from exc
            except (RequestError, RequestTimeout) as exc:
                logger.error("GitHub request could not be sent", function=func.__name__, operation=operation, error=str(exc))
                raise GitHubRequestError(operation, None, str(exc)) from exc

        return wrapper  # type: ignore

    return decorator


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library, scoped to one repository."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(
        cls,
        repo: str,
        token: str | None,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            token: Access token obtained through `login`
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            InvalidRepositoryError: If the repository name is malformed
            AuthenticationRequiredError: If no token is available
        """
        owner, repo_name = split_repository(repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(token, github_api_url)
        return cls(client, owner, repo_name)

    # Issue CRUD
    @raise_github_request_error("get issues")
    async def list_issue_page(self, page: int, per_page: int = ISSUES_PER_PAGE) -> list[Any]:
        """Return the raw JSON entries of one page of issues, newest first."""
        response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
            owner=self.owner,
            repo=self.repo_name,
            state="all",
            sort="created",
            direction="desc",
            per_page=per_page,
            page=page,
        )
        entries = response.json()
        if not isinstance(entries, list):
            raise MalformedResponseError(f"Expected a list of issues, got {type(entries).__name__}")
        return entries

    async def list_issues(self, max_pages: int = DEFAULT_MAX_ISSUE_PAGES) -> list[GitHubIssue]:
        """List decoded issues of the repository, excluding pull requests."""
        return await fetch_github_issues(self.list_issue_page, per_page=ISSUES_PER_PAGE, max_pages=max_pages)

    @raise_github_request_error("create issue")
    async def create_issue(self, title: str) -> int:
        """Create an issue and return its number."""
        response: Response[Issue] = await self.client.rest.issues.async_create(
            owner=self.owner,
            repo=self.repo_name,
            title=title,
        )
        issue_number = response.parsed_data.number
        logger.info("Created issue", issue_number=issue_number, title=title)
        return issue_number

    @raise_github_request_error("close issue")
    async def close_issue(self, issue_number: int) -> None:
        """Close an issue."""
        await self.client.rest.issues.async_update(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            state="closed",
        )
        logger.info("Closed issue", issue_number=issue_number)


@raise_github_request_error("get authenticated user")
async def get_authenticated_login(client: GitHubClient) -> str:
    """Return the login of the user owning the client's token."""
    response = await client.rest.users.async_get_authenticated()
    return extract_login_from_user_response(response.json())


async def repository_exists(client: GitHubClient, repo: str) -> bool:
    """Check whether a repository exists and is visible to the client.

    404 and 403 answers mean the repository is missing or inaccessible; any other
    failure is raised as GitHubRequestError.
    """
    owner, repo_name = split_repository(repo)
    try:
        await client.rest.repos.async_get(owner=owner, repo=repo_name)
    except RequestFailed as exc:
        if exc.response.status_code in (403, 404):
            logger.info("Repository not accessible", repo=repo, status_code=exc.response.status_code)
            return False
        raise GitHubRequestError("check repository", exc.response.status_code, _error_message(exc)) from exc
    except (RequestError, RequestTimeout) as exc:
        raise GitHubRequestError("check repository", None, str(exc)) from exc
    return True
