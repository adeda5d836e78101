"""Contains results of the push and pull workflows."""

from dataclasses import dataclass, field

from atat.checklist.models import TodoItem
from atat.synchronize.models import GitHubOperation


@dataclass(frozen=True)
class AppliedOperation:
    """One operation that was carried out on GitHub during a push."""

    todo_item: TodoItem
    operation: GitHubOperation
    issue_number: int | None


@dataclass
class PushResult:
    """Contains results of the push workflow."""

    repo: str
    applied: list[AppliedOperation] = field(default_factory=list)
    todo_items: list[TodoItem] = field(default_factory=list)


@dataclass
class PullResult:
    """Contains results of the pull workflow."""

    repo: str
    todo_items_before: list[TodoItem] = field(default_factory=list)
    todo_items: list[TodoItem] = field(default_factory=list)

    @property
    def checked_items(self) -> list[TodoItem]:
        """Items that were unchecked before the pull and are checked now."""
        return [after for before, after in zip(self.todo_items_before, self.todo_items) if after.is_checked and not before.is_checked]

    @property
    def added_items(self) -> list[TodoItem]:
        """Items appended for open issues that were not tracked locally."""
        return self.todo_items[len(self.todo_items_before) :]

    @property
    def changed(self) -> bool:
        """Whether the checklist differs from what was loaded."""
        return self.todo_items != self.todo_items_before
