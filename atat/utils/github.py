"""Contains utility functions for GitHub interactions."""

import re

from atat.configuration.exceptions import InvalidRepositoryError

REPOSITORY_NAME_PATTERN = re.compile(r"^[A-Za-z0-9-]+/[A-Za-z0-9._-]+$")


def split_repository(repo: str | None) -> tuple[str, str]:
    """Splits an 'owner/repo' string into owner and repository name."""
    if repo is None:
        raise InvalidRepositoryError("A repository in the format 'owner/repo' is required.")
    repo = repo.strip().strip("/")
    if not REPOSITORY_NAME_PATTERN.match(repo):
        raise InvalidRepositoryError(f"Repository must be in the format 'owner/repo', got '{repo}'.")
    owner, repository = repo.split("/")
    return owner, repository
