"""Data model for a single checklist item."""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class TodoItem:
    """One markdown task-list line.

    `text` is stored trimmed. `issue_number` links the item to a GitHub issue
    once one has been created or discovered for it. `source_lines` is the
    half-open range of document lines the item's text was parsed from; it is
    None for items that do not exist in the file yet.
    """

    text: str
    is_checked: bool = False
    issue_number: int | None = None
    source_lines: tuple[int, int] | None = field(default=None, compare=False, repr=False)

    def checked(self) -> "TodoItem":
        """Return a checked copy of this item."""
        return replace(self, is_checked=True)

    def with_issue_number(self, issue_number: int) -> "TodoItem":
        """Return a copy of this item linked to the given issue."""
        return replace(self, issue_number=issue_number)
