"""Local markdown checklist model and codec."""

from .markdown import parse_todo_markdown, serialize_todo_markdown, update_todo_markdown
from .models import TodoItem

__all__ = [
    "TodoItem",
    "parse_todo_markdown",
    "serialize_todo_markdown",
    "update_todo_markdown",
]
