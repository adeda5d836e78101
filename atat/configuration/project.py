"""Parsing and merging of the per-project configuration."""

import json
from enum import Enum
from typing import Any, Mapping

from atat.configuration.exceptions import ProjectConfigError


class ConfigKey(str, Enum):
    """Keys recognized in the project configuration file."""

    REPOSITORIES = "repositories"


ProjectConfig = dict[ConfigKey, Any]


def parse_config(content: bytes | str) -> ProjectConfig:
    """Parse project configuration JSON.

    Empty or whitespace-only content yields an empty configuration. The document
    must otherwise be a JSON object; keys that are not a ConfigKey are dropped.

    Raises:
        ProjectConfigError: If the content is not valid JSON or not an object.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    if not content.strip():
        return {}
    try:
        value = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ProjectConfigError(f"Failed to parse config JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise ProjectConfigError("Config must be a JSON object")
    return {key: value[key.value] for key in ConfigKey if key.value in value}


def dump_config(config: Mapping[ConfigKey, Any]) -> str:
    """Serialize a project configuration to JSON text."""
    return json.dumps({key.value: value for key, value in config.items()}, indent=2) + "\n"


def update_config(base_config: Mapping[ConfigKey, Any], updates: Mapping[ConfigKey, Any]) -> ProjectConfig:
    """Return a copy of `base_config` with `updates` applied; neither input is modified."""
    new_config = dict(base_config)
    new_config.update(updates)
    return new_config


def get_repositories(config: Mapping[ConfigKey, Any]) -> list[str]:
    """Return the configured repositories, ignoring non-string entries.

    Raises:
        ProjectConfigError: If the repositories entry is present but not a list.
    """
    repositories = config.get(ConfigKey.REPOSITORIES, [])
    if not isinstance(repositories, list):
        raise ProjectConfigError("'repositories' key in config is not an array")
    return [repo for repo in repositories if isinstance(repo, str)]
