"""Persistence of the per-project configuration file."""

from pathlib import Path
from typing import Any, Mapping, Protocol

import structlog

from atat.configuration.project import ConfigKey, ProjectConfig, dump_config, parse_config
from atat.utils.constants import PROJECT_CONFIG_DIR, PROJECT_CONFIG_FILENAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class ConfigStorage(Protocol):
    """Load and save the project configuration."""

    def load_config(self) -> ProjectConfig:
        """Return the stored configuration, empty when nothing is stored."""
        ...

    def save_config(self, config: Mapping[ConfigKey, Any]) -> None:
        """Persist the configuration."""
        ...


class LocalConfigStorage:
    """Stores the configuration in `.atat/config.json` under the project directory."""

    def __init__(self, project_dir: Path | None = None) -> None:
        """Initialize the storage for `project_dir`, defaulting to the working directory."""
        self.path = (project_dir or Path.cwd()) / PROJECT_CONFIG_DIR / PROJECT_CONFIG_FILENAME

    def load_config(self) -> ProjectConfig:
        """Return the parsed configuration; a missing file is an empty configuration."""
        if not self.path.exists():
            return {}
        return parse_config(self.path.read_bytes())

    def save_config(self, config: Mapping[ConfigKey, Any]) -> None:
        """Write the configuration, creating the `.atat` directory if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(dump_config(config), encoding="utf-8")
        logger.info("Saved project configuration", path=str(self.path))
