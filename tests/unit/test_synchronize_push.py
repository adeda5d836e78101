"""Unit tests for the push reconciliation."""

from unittest.mock import AsyncMock

import pytest

from atat.checklist.models import TodoItem
from atat.github.exceptions import GitHubRequestError
from atat.synchronize.models import CloseIssue, CreateIssue
from atat.synchronize.push import apply_todo_updates, calculate_github_operations, calculate_todo_updates
from tests.unit.utils import closed_issue, open_issue


@pytest.mark.parametrize(
    "todo_item,github_issues,expected",
    [
        pytest.param(TodoItem("New"), [], [CreateIssue(title="New")], id="unchecked_without_number_creates"),
        pytest.param(TodoItem("Done", is_checked=True, issue_number=5), [open_issue(5, "Done")], [CloseIssue(number=5)], id="checked_open_closes"),
        pytest.param(TodoItem("Done", is_checked=True, issue_number=5), [closed_issue(5, "Done")], [], id="checked_closed_noop"),
        pytest.param(TodoItem("Done", is_checked=True, issue_number=5), [], [], id="checked_missing_noop"),
        pytest.param(TodoItem("Local", is_checked=True), [], [], id="checked_without_number_noop"),
        pytest.param(TodoItem("Tracked", issue_number=5), [open_issue(5, "Tracked")], [], id="unchecked_with_number_noop"),
        pytest.param(TodoItem("Tracked", issue_number=5), [closed_issue(5, "Tracked")], [], id="unchecked_closed_remote_noop"),
    ],
)
def test_calculate_github_operations_rules(todo_item: TodoItem, github_issues: list, expected: list) -> None:
    """Test the operation chosen for each kind of checklist item."""
    operations = calculate_github_operations([todo_item], github_issues)
    assert [operation for _, operation in operations] == expected
    assert all(item == todo_item for item, _ in operations)


def test_calculate_github_operations_keeps_checklist_order() -> None:
    """Test that operations follow the checklist order."""
    todo_items = [
        TodoItem("First"),
        TodoItem("Close me", is_checked=True, issue_number=9),
        TodoItem("Ignored", issue_number=3),
        TodoItem("Second"),
    ]
    operations = calculate_github_operations(todo_items, [open_issue(9, "Close me"), open_issue(3, "Ignored")])
    assert operations == [
        (todo_items[0], CreateIssue(title="First")),
        (todo_items[1], CloseIssue(number=9)),
        (todo_items[3], CreateIssue(title="Second")),
    ]


def test_calculate_github_operations_first_duplicate_issue_wins() -> None:
    """Test that the first remote issue with a given number decides the operation."""
    todo_item = TodoItem("Done", is_checked=True, issue_number=5)
    assert calculate_github_operations([todo_item], [closed_issue(5, "Done"), open_issue(5, "Done")]) == []


def test_calculate_github_operations_is_idempotent_without_mutation() -> None:
    """Test that repeated calculation over unchanged inputs yields the same operations."""
    todo_items = [TodoItem("New"), TodoItem("Done", is_checked=True, issue_number=2)]
    github_issues = [open_issue(2, "Done")]
    assert calculate_github_operations(todo_items, github_issues) == calculate_github_operations(todo_items, github_issues)


@pytest.mark.asyncio
async def test_calculate_todo_updates_returns_created_number() -> None:
    """Test that a create yields the number returned by the issue creator."""
    todo_item = TodoItem("New")
    operations = calculate_github_operations([todo_item], [])
    issue_creator = AsyncMock(return_value=42)
    issue_closer = AsyncMock()
    updates = await calculate_todo_updates(operations, issue_creator, issue_closer)
    assert updates == [(todo_item, 42)]
    issue_creator.assert_awaited_once_with("New")
    issue_closer.assert_not_awaited()


@pytest.mark.asyncio
async def test_calculate_todo_updates_close_yields_none() -> None:
    """Test that a close yields no issue number."""
    todo_item = TodoItem("Done", is_checked=True, issue_number=5)
    issue_closer = AsyncMock()
    updates = await calculate_todo_updates([(todo_item, CloseIssue(number=5))], AsyncMock(), issue_closer)
    assert updates == [(todo_item, None)]
    issue_closer.assert_awaited_once_with(5)


@pytest.mark.asyncio
async def test_calculate_todo_updates_stops_at_first_failure() -> None:
    """Test that a failing operation aborts the batch without touching later items."""
    operations = [
        (TodoItem("A"), CreateIssue(title="A")),
        (TodoItem("B"), CreateIssue(title="B")),
        (TodoItem("C"), CreateIssue(title="C")),
    ]
    issue_creator = AsyncMock(side_effect=[1, GitHubRequestError("create issue", 500), 3])
    with pytest.raises(GitHubRequestError):
        await calculate_todo_updates(operations, issue_creator, AsyncMock())
    assert [call.args for call in issue_creator.await_args_list] == [("A",), ("B",)]


@pytest.mark.asyncio
async def test_calculate_todo_updates_rejects_unknown_operation() -> None:
    """Test that an unsupported operation raises TypeError."""
    with pytest.raises(TypeError):
        await calculate_todo_updates([(TodoItem("A"), "delete")], AsyncMock(), AsyncMock())  # type: ignore[list-item]


def test_apply_todo_updates_writes_new_numbers() -> None:
    """Test that created numbers are stored on the matching items only."""
    todo_items = [TodoItem("New"), TodoItem("Done", is_checked=True, issue_number=5), TodoItem("Other", issue_number=8)]
    updated = apply_todo_updates(todo_items, [(todo_items[0], 42), (todo_items[1], None)])
    assert updated == [TodoItem("New", issue_number=42), todo_items[1], todo_items[2]]


def test_apply_todo_updates_handles_repeated_items() -> None:
    """Test that identical items each receive their own issue number."""
    todo_items = [TodoItem("Same"), TodoItem("Same")]
    updated = apply_todo_updates(todo_items, [(todo_items[0], 1), (todo_items[1], 2)])
    assert updated == [TodoItem("Same", issue_number=1), TodoItem("Same", issue_number=2)]


def test_apply_todo_updates_partial_batch() -> None:
    """Test that a partial batch only updates the items it covers."""
    todo_items = [TodoItem("A"), TodoItem("B")]
    assert apply_todo_updates(todo_items, [(todo_items[0], 1)]) == [TodoItem("A", issue_number=1), TodoItem("B")]


def test_calculate_github_operations_for_mixed_checklist(sample_items: list[TodoItem]) -> None:
    """Test a checklist mixing new, linked and checked items."""
    operations = calculate_github_operations(sample_items, [open_issue(7, "Fix login"), open_issue(3, "Tracked task")])
    assert [operation for _, operation in operations] == [CreateIssue(title="Write docs"), CloseIssue(number=7)]
