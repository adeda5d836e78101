"""Contains the push direction of the reconciliation: local checklist to GitHub issues."""

from typing import Awaitable, Callable, Iterable, Sequence

import structlog

from atat.checklist.models import TodoItem
from atat.github.issues import GitHubIssue
from atat.synchronize.models import CloseIssue, CreateIssue, GitHubOperation

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

IssueCreator = Callable[[str], Awaitable[int]]
IssueCloser = Callable[[int], Awaitable[None]]


def index_issues_by_number(github_issues: Iterable[GitHubIssue]) -> dict[int, GitHubIssue]:
    """Index issues by number, keeping the first occurrence of a duplicated number."""
    issues_by_number: dict[int, GitHubIssue] = {}
    for issue in github_issues:
        issues_by_number.setdefault(issue.number, issue)
    return issues_by_number


def decide_github_operation(todo_item: TodoItem, issues_by_number: dict[int, GitHubIssue]) -> GitHubOperation | None:
    """Decide which remote operation, if any, a single checklist item calls for."""
    if not todo_item.is_checked and todo_item.issue_number is None:
        return CreateIssue(title=todo_item.text)
    if todo_item.is_checked and todo_item.issue_number is not None:
        github_issue = issues_by_number.get(todo_item.issue_number)
        if github_issue is not None and github_issue.is_open:
            return CloseIssue(number=todo_item.issue_number)
    return None


def calculate_github_operations(
    todo_items: Sequence[TodoItem],
    github_issues: Iterable[GitHubIssue],
) -> list[tuple[TodoItem, GitHubOperation]]:
    """Derive the remote operations for a checklist, in checklist order.

    Unchecked items without an issue number create an issue. Checked items whose
    issue is still open close it. Every other item is left alone.
    """
    issues_by_number = index_issues_by_number(github_issues)
    operations: list[tuple[TodoItem, GitHubOperation]] = []
    for todo_item in todo_items:
        operation = decide_github_operation(todo_item, issues_by_number)
        if operation is not None:
            operations.append((todo_item, operation))
    logger.debug("Calculated GitHub operations", item_count=len(todo_items), operation_count=len(operations))
    return operations


async def calculate_todo_updates(
    github_operations: Sequence[tuple[TodoItem, GitHubOperation]],
    issue_creator: IssueCreator,
    issue_closer: IssueCloser,
) -> list[tuple[TodoItem, int | None]]:
    """Apply operations in order and report the issue number to store for each item.

    A create yields the new issue number; a close yields None. The first failing
    call aborts the batch and its exception propagates. Operations applied before
    it are not rolled back.
    """
    updates: list[tuple[TodoItem, int | None]] = []
    for todo_item, operation in github_operations:
        if isinstance(operation, CreateIssue):
            issue_number = await issue_creator(operation.title)
            updates.append((todo_item, issue_number))
        elif isinstance(operation, CloseIssue):
            await issue_closer(operation.number)
            updates.append((todo_item, None))
        else:
            raise TypeError(f"Unsupported GitHub operation: {operation!r}")
    return updates


def apply_todo_updates(
    todo_items: Sequence[TodoItem],
    todo_updates: Sequence[tuple[TodoItem, int | None]],
) -> list[TodoItem]:
    """Write newly created issue numbers back into the checklist.

    Updates are matched against the checklist in order, so repeated identical
    items each receive their own issue number.
    """
    pending = list(todo_updates)
    updated_items: list[TodoItem] = []
    for todo_item in todo_items:
        if pending and pending[0][0] == todo_item:
            _, issue_number = pending.pop(0)
            if issue_number is not None:
                todo_item = todo_item.with_issue_number(issue_number)
        updated_items.append(todo_item)
    return updated_items
