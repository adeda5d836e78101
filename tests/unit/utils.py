"""Shared builders and in-memory fakes for unit tests."""

from typing import Any

from atat.github.abc import GitHubClientBase
from atat.github.exceptions import GitHubRequestError
from atat.github.issues import GitHubIssue, IssueState


def open_issue(number: int, title: str) -> GitHubIssue:
    """Build an open issue."""
    return GitHubIssue(number=number, title=title, state=IssueState.OPEN)


def closed_issue(number: int, title: str) -> GitHubIssue:
    """Build a closed issue."""
    return GitHubIssue(number=number, title=title, state=IssueState.CLOSED)


class InMemoryTokenStorage:
    """Token storage kept in memory."""

    def __init__(self, token: str | None = None) -> None:
        """Initialize with an optional stored token."""
        self.token = token

    def load(self) -> str | None:
        """Return the stored token."""
        return self.token

    def save(self, token: str) -> None:
        """Store the token."""
        self.token = token

    def delete(self) -> None:
        """Forget the token."""
        self.token = None


class InMemoryConfigStorage:
    """Config storage kept in memory."""

    def __init__(self, config: dict | None = None) -> None:
        """Initialize with an optional stored configuration."""
        self.config = dict(config or {})

    def load_config(self) -> dict:
        """Return a copy of the stored configuration."""
        return dict(self.config)

    def save_config(self, config: dict) -> None:
        """Store a copy of the configuration."""
        self.config = dict(config)


class FakeGitHubAdapter(GitHubClientBase):
    """Repository adapter recording calls against an in-memory issue list."""

    def __init__(self, issues: list[GitHubIssue] | None = None, next_number: int = 100, fail_on_call: int | None = None) -> None:
        """Initialize with existing issues; `fail_on_call` makes the n-th create/close call (1-based) fail."""
        self.issues = list(issues or [])
        self.next_number = next_number
        self.fail_on_call = fail_on_call
        self.calls: list[tuple[str, Any]] = []

    def _check_failure(self, operation: str) -> None:
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise GitHubRequestError(operation, 500)

    async def list_issue_page(self, page: int, per_page: int) -> list[Any]:
        """Not used by the fake; issues are listed directly."""
        raise NotImplementedError

    async def list_issues(self, max_pages: int) -> list[GitHubIssue]:
        """Return the in-memory issues."""
        return list(self.issues)

    async def create_issue(self, title: str) -> int:
        """Record the call and return the next issue number."""
        self.calls.append(("create", title))
        self._check_failure("create issue")
        issue_number = self.next_number
        self.next_number += 1
        self.issues.append(GitHubIssue(number=issue_number, title=title, state=IssueState.OPEN))
        return issue_number

    async def close_issue(self, issue_number: int) -> None:
        """Record the call and mark the issue closed."""
        self.calls.append(("close", issue_number))
        self._check_failure("close issue")
        self.issues = [
            GitHubIssue(number=issue.number, title=issue.title, state=IssueState.CLOSED) if issue.number == issue_number else issue
            for issue in self.issues
        ]
