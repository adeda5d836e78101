"""Contains unit tests for the utils.github module."""

import pytest

from atat.configuration.exceptions import InvalidRepositoryError
from atat.utils.github import split_repository


def test_split_repository_valid() -> None:
    """Test splitting a valid owner/repo string."""
    owner, repo = split_repository("octocat/Hello-World")
    assert owner == "octocat"
    assert repo == "Hello-World"


def test_split_repository_missing() -> None:
    """Test that InvalidRepositoryError is raised if repo is None."""
    with pytest.raises(InvalidRepositoryError, match="A repository in the format 'owner/repo' is required."):
        split_repository(None)


@pytest.mark.parametrize(
    "malformed_repo",
    [
        pytest.param("", id="empty string"),
        pytest.param("/", id="only a slash"),
        pytest.param("octocat-HelloWorld", id="no slash"),
        pytest.param("owner/repo/extra", id="too many parts"),
        pytest.param("owner/", id="missing repo"),
        pytest.param("own er/repo", id="space in owner"),
        pytest.param("owner/re po", id="space in repo"),
    ],
)
def test_split_repository_various_malformed(malformed_repo: str) -> None:
    """Test that InvalidRepositoryError is raised if repo is malformed (various cases)."""
    with pytest.raises(InvalidRepositoryError, match="Repository must be in the format 'owner/repo'"):
        split_repository(malformed_repo)


@pytest.mark.parametrize(
    "repo_input,expected_owner,expected_repo",
    [
        pytest.param("octocat/Hello-World", "octocat", "Hello-World", id="no slashes"),
        pytest.param("/octocat/Hello-World", "octocat", "Hello-World", id="leading slash"),
        pytest.param("octocat/Hello-World/", "octocat", "Hello-World", id="trailing slash"),
        pytest.param(" octocat/hello.world_2 ", "octocat", "hello.world_2", id="whitespace and punctuation"),
    ],
)
def test_split_repository_strips_slashes(repo_input: str, expected_owner: str, expected_repo: str) -> None:
    """Test that surrounding slashes and whitespace are stripped and owner/repo are parsed correctly."""
    owner, repo = split_repository(repo_input)
    assert owner == expected_owner
    assert repo == expected_repo
