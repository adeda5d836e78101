"""GitHub issue model, JSON decoding, and bounded pagination."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Sequence

import structlog

from atat.utils.constants import DEFAULT_MAX_ISSUE_PAGES, ISSUES_PER_PAGE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

IssuePageFetcher = Callable[[int, int], Awaitable[Sequence[Any]]]
"""Capability returning the raw JSON entries of one issue page: (page, per_page) -> entries."""


class IssueState(str, Enum):
    """Enum for GitHub issue states."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class GitHubIssue:
    """A repository issue as seen by the reconciliation engine."""

    number: int
    title: str
    state: IssueState

    @property
    def is_open(self) -> bool:
        """Whether the issue is open."""
        return self.state == IssueState.OPEN


def _decode_issue(entry: Any) -> GitHubIssue | None:
    if not isinstance(entry, Mapping):
        return None
    number = entry.get("number")
    title = entry.get("title")
    state = entry.get("state")
    # bool is a subclass of int and must not pass as an issue number.
    if not isinstance(number, int) or isinstance(number, bool) or number < 0:
        return None
    if not isinstance(title, str):
        return None
    if entry.get("pull_request") is not None:
        return None
    try:
        issue_state = IssueState(state)
    except ValueError:
        return None
    return GitHubIssue(number=number, title=title, state=issue_state)


def parse_github_issues(payload: Sequence[Any]) -> list[GitHubIssue]:
    """Decode raw issue entries, dropping pull requests and malformed entries."""
    issues: list[GitHubIssue] = []
    for entry in payload:
        issue = _decode_issue(entry)
        if issue is None:
            logger.debug("Skipping issue list entry", number=entry.get("number") if isinstance(entry, Mapping) else None)
            continue
        issues.append(issue)
    return issues


async def fetch_github_issues(
    fetch_page: IssuePageFetcher,
    per_page: int = ISSUES_PER_PAGE,
    max_pages: int = DEFAULT_MAX_ISSUE_PAGES,
) -> list[GitHubIssue]:
    """Fetch and decode issues page by page.

    Stops at the first empty page or after `max_pages` pages, whichever comes first.
    Errors raised by `fetch_page` propagate unchanged.
    """
    all_issues: list[GitHubIssue] = []
    for page in range(1, max_pages + 1):
        entries = await fetch_page(page, per_page)
        if not entries:
            break
        all_issues.extend(parse_github_issues(entries))
    else:
        logger.info("Stopped fetching issues at the page limit", max_pages=max_pages)
    logger.info("Fetched issues from GitHub", issue_count=len(all_issues))
    return all_issues
