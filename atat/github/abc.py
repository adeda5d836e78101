"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any

from atat.github.issues import GitHubIssue


class GitHubClientBase(ABC):
    """Base ABC for the repository-scoped GitHub operations the synchronizer needs."""

    # Issue CRUD
    @abstractmethod
    async def list_issue_page(self, page: int, per_page: int) -> list[Any]:
        """Return the raw JSON entries of one page of issues, newest first."""
        pass

    @abstractmethod
    async def list_issues(self, max_pages: int) -> list[GitHubIssue]:
        """List decoded issues of the repository, excluding pull requests."""
        pass

    @abstractmethod
    async def create_issue(self, title: str) -> int:
        """Create an issue and return its number."""
        pass

    @abstractmethod
    async def close_issue(self, issue_number: int) -> None:
        """Close an issue."""
        pass
