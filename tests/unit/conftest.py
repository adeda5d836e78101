"""Fixtures for unit tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog

from atat.checklist.models import TodoItem


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def todo_path(tmp_path: Path) -> Path:
    """Path of a TODO.md file inside a temporary project."""
    return tmp_path / "TODO.md"


@pytest.fixture
def sample_items() -> list[TodoItem]:
    """A checklist mixing new, linked, and checked items."""
    return [
        TodoItem("Write docs"),
        TodoItem("Fix login", is_checked=True, issue_number=7),
        TodoItem("Tracked task", issue_number=3),
    ]
