"""Unit tests for project configuration parsing and merging."""

import json

import pytest

from atat.configuration.exceptions import ProjectConfigError
from atat.configuration.project import ConfigKey, dump_config, get_repositories, parse_config, update_config


@pytest.mark.parametrize(
    "content,expected",
    [
        pytest.param(b"", {}, id="empty"),
        pytest.param(b"  \n ", {}, id="whitespace"),
        pytest.param(b"{}", {}, id="empty_object"),
        pytest.param(b'{"repositories": ["owner/repo"]}', {ConfigKey.REPOSITORIES: ["owner/repo"]}, id="repositories"),
        pytest.param(b'{"repositories": [], "unknown": 1}', {ConfigKey.REPOSITORIES: []}, id="unknown_key_dropped"),
        pytest.param('{"repositories": ["a/b"]}', {ConfigKey.REPOSITORIES: ["a/b"]}, id="text"),
    ],
)
def test_parse_config(content: bytes | str, expected: dict) -> None:
    """Test parsing of valid configuration documents."""
    assert parse_config(content) == expected


@pytest.mark.parametrize(
    "content",
    [
        pytest.param(b"{invalid", id="invalid_json"),
        pytest.param(b'["owner/repo"]', id="array"),
        pytest.param(b'"owner/repo"', id="string"),
    ],
)
def test_parse_config_rejects_non_objects(content: bytes) -> None:
    """Test that invalid JSON and non-object documents raise ProjectConfigError."""
    with pytest.raises(ProjectConfigError):
        parse_config(content)


def test_dump_config_uses_plain_keys() -> None:
    """Test that the configuration is written with its JSON key names."""
    assert json.loads(dump_config({ConfigKey.REPOSITORIES: ["owner/repo"]})) == {"repositories": ["owner/repo"]}


def test_update_config_does_not_mutate_base() -> None:
    """Test that updates return a new mapping."""
    base = {ConfigKey.REPOSITORIES: ["a/b"]}
    updated = update_config(base, {ConfigKey.REPOSITORIES: ["a/b", "c/d"]})
    assert updated == {ConfigKey.REPOSITORIES: ["a/b", "c/d"]}
    assert base == {ConfigKey.REPOSITORIES: ["a/b"]}


def test_get_repositories() -> None:
    """Test that only string entries are returned, in order."""
    assert get_repositories({}) == []
    assert get_repositories({ConfigKey.REPOSITORIES: ["a/b", 3, None, "c/d"]}) == ["a/b", "c/d"]


def test_get_repositories_rejects_non_list() -> None:
    """Test that a repositories entry that is not a list raises ProjectConfigError."""
    with pytest.raises(ProjectConfigError, match="not an array"):
        get_repositories({ConfigKey.REPOSITORIES: "owner/repo"})
