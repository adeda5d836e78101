"""Operations derived by the push reconciliation."""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class CreateIssue:
    """Open a new issue for a local item that has no remote counterpart."""

    title: str


@dataclass(frozen=True)
class CloseIssue:
    """Close the open issue of a checked local item."""

    number: int


GitHubOperation: TypeAlias = CreateIssue | CloseIssue
