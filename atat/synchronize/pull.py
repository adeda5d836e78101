"""Contains the pull direction of the reconciliation: GitHub issues to local checklist."""

from typing import Iterable, Sequence

import structlog

from atat.checklist.models import TodoItem
from atat.github.issues import GitHubIssue, IssueState
from atat.synchronize.push import index_issues_by_number

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def mark_closed_items(todo_items: Sequence[TodoItem], issues_by_number: dict[int, GitHubIssue]) -> list[TodoItem]:
    """Check every unchecked item whose issue has been closed remotely."""
    updated_items: list[TodoItem] = []
    for todo_item in todo_items:
        if todo_item.issue_number is not None and not todo_item.is_checked:
            github_issue = issues_by_number.get(todo_item.issue_number)
            if github_issue is not None and github_issue.state == IssueState.CLOSED:
                logger.debug("Checking item closed on GitHub", issue_number=todo_item.issue_number, text=todo_item.text)
                todo_item = todo_item.checked()
        updated_items.append(todo_item)
    return updated_items


def find_untracked_open_issues(todo_items: Sequence[TodoItem], github_issues: Iterable[GitHubIssue]) -> list[GitHubIssue]:
    """Return open issues that no item references by number or by trimmed title, in given order."""
    # Titles match every item, including items already linked to another issue.
    tracked_numbers = {item.issue_number for item in todo_items if item.issue_number is not None}
    tracked_texts = {item.text.strip() for item in todo_items}
    untracked: list[GitHubIssue] = []
    for github_issue in github_issues:
        if not github_issue.is_open:
            continue
        if github_issue.number in tracked_numbers or github_issue.title.strip() in tracked_texts:
            continue
        untracked.append(github_issue)
    return untracked


def synchronize_with_github_issues(todo_items: Sequence[TodoItem], github_issues: Sequence[GitHubIssue]) -> list[TodoItem]:
    """Bring the checklist up to date with the remote issues.

    Items whose issue was closed on GitHub become checked, in place. Open issues
    not yet tracked locally are appended as unchecked items. Closed issues without
    a local item are ignored, and checked items are never unchecked.
    """
    issues_by_number = index_issues_by_number(github_issues)
    updated_items = mark_closed_items(todo_items, issues_by_number)
    new_items = [
        TodoItem(text=github_issue.title.strip(), is_checked=False, issue_number=github_issue.number)
        for github_issue in find_untracked_open_issues(updated_items, issues_by_number.values())
    ]
    logger.debug(
        "Synchronized checklist with GitHub issues",
        item_count=len(todo_items),
        issue_count=len(issues_by_number),
        new_item_count=len(new_items),
    )
    return updated_items + new_items
