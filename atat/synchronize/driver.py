"""Orchestrates the synchronization between TODO.md and GitHub issues."""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

import structlog

from atat.checklist.markdown import parse_todo_markdown, update_todo_markdown
from atat.checklist.models import TodoItem
from atat.configuration.project import get_repositories
from atat.github.abc import GitHubClientBase
from atat.github.adapter import GitHubKitAdapter
from atat.storage.project import ConfigStorage
from atat.storage.tokens import TokenStorage
from atat.synchronize.exceptions import AuthenticationRequiredError, RepositoryNotConfiguredError, TodoFileNotFoundError
from atat.synchronize.pull import synchronize_with_github_issues
from atat.synchronize.push import apply_todo_updates, calculate_github_operations, calculate_todo_updates
from atat.synchronize.results import AppliedOperation, PullResult, PushResult
from atat.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_MAX_ISSUE_PAGES

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

AdapterFactory = Callable[[str, str], Awaitable[GitHubClientBase]]
"""Builds a repository-scoped adapter from (repo, token)."""


@dataclass(frozen=True)
class SyncTarget:
    """Everything a synchronization needs before the first network call."""

    token: str
    repo: str
    todo_path: Path
    todo_content: str
    todo_items: list[TodoItem]


def read_todo_file(todo_path: Path) -> str:
    """Read the checklist file."""
    if not todo_path.is_file():
        raise TodoFileNotFoundError(todo_path.name)
    return todo_path.read_text(encoding="utf-8")


def write_todo_items(target: SyncTarget, todo_items: list[TodoItem]) -> None:
    """Write checklist changes into the file the target was loaded from, keeping its other content."""
    target.todo_path.write_text(update_todo_markdown(target.todo_content, todo_items), encoding="utf-8")
    logger.info("Wrote checklist", path=str(target.todo_path), item_count=len(todo_items))


def load_sync_target(token_storage: TokenStorage, config_storage: ConfigStorage, todo_path: Path) -> SyncTarget:
    """Check every local precondition of push and pull.

    The first configured repository is the synchronization target.

    Raises:
        AuthenticationRequiredError: If no token is stored.
        RepositoryNotConfiguredError: If the project has no repository.
        TodoFileNotFoundError: If the checklist file is missing.
    """
    token = token_storage.load()
    if not token:
        raise AuthenticationRequiredError()
    repositories = get_repositories(config_storage.load_config())
    if not repositories:
        raise RepositoryNotConfiguredError()
    todo_content = read_todo_file(todo_path)
    return SyncTarget(
        token=token,
        repo=repositories[0],
        todo_path=todo_path,
        todo_content=todo_content,
        todo_items=parse_todo_markdown(todo_content),
    )


def github_adapter_factory(github_api_url: str = DEFAULT_GITHUB_API_URL) -> AdapterFactory:
    """Return a factory creating githubkit adapters against `github_api_url`."""

    async def create(repo: str, token: str) -> GitHubClientBase:
        return await GitHubKitAdapter.create(repo=repo, token=token, github_api_url=github_api_url)

    return create


async def run_push_workflow(
    target: SyncTarget,
    adapter_factory: AdapterFactory,
    max_pages: int = DEFAULT_MAX_ISSUE_PAGES,
    on_applied: Callable[[AppliedOperation], None] | None = None,
) -> PushResult:
    """Create and close issues for the checklist and write new issue numbers back.

    Operations run in checklist order and stop at the first failure. Issue numbers
    created before a failure are still written back before the error propagates,
    so the next push does not create them again.
    """
    github_adapter = await adapter_factory(target.repo, target.token)

    start_time = time.time()
    github_issues = await github_adapter.list_issues(max_pages=max_pages)
    operations = calculate_github_operations(target.todo_items, github_issues)
    logger.info("Pushing checklist", repo=target.repo, item_count=len(target.todo_items), operation_count=len(operations))

    result = PushResult(repo=target.repo, todo_items=list(target.todo_items))

    def record(issue_number: int | None) -> None:
        todo_item, operation = operations[len(result.applied)]
        applied = AppliedOperation(todo_item=todo_item, operation=operation, issue_number=issue_number)
        result.applied.append(applied)
        if on_applied is not None:
            on_applied(applied)

    async def create_issue(title: str) -> int:
        issue_number = await github_adapter.create_issue(title)
        record(issue_number)
        return issue_number

    async def close_issue(issue_number: int) -> None:
        await github_adapter.close_issue(issue_number)
        record(None)

    try:
        todo_updates = await calculate_todo_updates(operations, create_issue, close_issue)
    finally:
        applied_updates = [(applied.todo_item, applied.issue_number) for applied in result.applied]
        if any(issue_number is not None for _, issue_number in applied_updates):
            result.todo_items = apply_todo_updates(target.todo_items, applied_updates)
            write_todo_items(target, result.todo_items)

    logger.info("Pushed checklist", repo=target.repo, applied_count=len(todo_updates), duration=round(time.time() - start_time, 2))
    return result


async def run_pull_workflow(
    target: SyncTarget,
    adapter_factory: AdapterFactory,
    max_pages: int = DEFAULT_MAX_ISSUE_PAGES,
) -> PullResult:
    """Update the checklist from the repository's issues and write it back when it changed."""
    github_adapter = await adapter_factory(target.repo, target.token)

    start_time = time.time()
    github_issues = await github_adapter.list_issues(max_pages=max_pages)
    todo_items = synchronize_with_github_issues(target.todo_items, github_issues)
    result = PullResult(repo=target.repo, todo_items_before=list(target.todo_items), todo_items=todo_items)
    if result.changed:
        write_todo_items(target, todo_items)
    logger.info(
        "Pulled issues",
        repo=target.repo,
        checked_count=len(result.checked_items),
        added_count=len(result.added_items),
        duration=round(time.time() - start_time, 2),
    )
    return result
