"""Markdown codec for TODO.md checklists."""

import re
from dataclasses import dataclass, field
from typing import Sequence

import structlog
from markdown_it import MarkdownIt
from markdown_it.token import Token

from atat.checklist.models import TodoItem

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TASK_MARKER_PATTERN = re.compile(r"^\[([ xX])\](?:\s+|$)")
TASK_LINE_PATTERN = re.compile(r"^(?P<prefix>[^\[]*)\[(?P<mark>[ xX])\]")
ISSUE_NUMBER_PATTERN = re.compile(r"[0-9]+")
ISSUE_REFERENCE_PREFIX = " (#"

# Inline tokens whose content is part of the visible item text. Markup tokens
# such as strong_open or link_open carry no text and are skipped.
TEXT_TOKEN_TYPES = {"text", "text_special", "code_inline"}
BREAK_TOKEN_TYPES = {"softbreak", "hardbreak"}
LIST_OPEN_TOKEN_TYPES = {"bullet_list_open", "ordered_list_open"}

_parser = MarkdownIt("commonmark").enable("strikethrough")


@dataclass
class _PendingItem:
    """A task-list item whose text is still being collected."""

    level: int
    is_checked: bool
    first_line: int
    end_line: int
    parts: list[str] = field(default_factory=list)

    def finish(self) -> TodoItem | None:
        text = " ".join(part.strip() for part in self.parts if part.strip())
        if not text:
            return None
        clean_text, issue_number = split_issue_reference(text)
        return TodoItem(
            text=clean_text,
            is_checked=self.is_checked,
            issue_number=issue_number,
            source_lines=(self.first_line, self.end_line),
        )


def split_issue_reference(text: str) -> tuple[str, int | None]:
    """Split a trailing ' (#123)' reference off item text.

    Malformed references such as '(#)', '(#abc)' or '(# 12)' are left in the text.
    """
    position = text.rfind(ISSUE_REFERENCE_PREFIX)
    if position == -1:
        return text, None
    closing = text.find(")", position)
    if closing == -1:
        return text, None
    digits = text[position + len(ISSUE_REFERENCE_PREFIX) : closing]
    if not ISSUE_NUMBER_PATTERN.fullmatch(digits):
        return text, None
    return text[:position].strip(), int(digits)


def _inline_text(children: Sequence[Token]) -> str:
    parts: list[str] = []
    for child in children:
        if child.type in TEXT_TOKEN_TYPES:
            parts.append(child.content)
        elif child.type in BREAK_TOKEN_TYPES:
            parts.append(" ")
    return "".join(parts)


def _start_item(paragraph: Token, inline: Token, level: int) -> _PendingItem | None:
    children = inline.children or []
    if not children or children[0].type != "text":
        return None
    # inline.content is the raw source, so an escaped "\[ ]" does not match.
    if TASK_MARKER_PATTERN.match(inline.content) is None:
        return None
    raw_text = _inline_text(children)
    match = TASK_MARKER_PATTERN.match(raw_text)
    if match is None:
        return None
    first_line, end_line = paragraph.map or (0, 0)
    return _PendingItem(
        level=level,
        is_checked=match.group(1) in ("x", "X"),
        first_line=first_line,
        end_line=end_line,
        parts=[raw_text[match.end() :]],
    )


def parse_todo_markdown(content: str) -> list[TodoItem]:
    """Parse every task-list item in a markdown document.

    An item's text is its opening paragraph plus any further paragraphs of the
    same list item, up to a nested list. Nested task lists are flattened in
    document order and formatting markup is stripped from item text. Anything
    that is not a task-list item is ignored.
    """
    tokens = _parser.parse(content)
    items: list[TodoItem] = []
    pending: _PendingItem | None = None
    awaiting_level: int | None = None
    for index, token in enumerate(tokens):
        if token.type == "list_item_open":
            awaiting_level = token.level
        elif token.type in LIST_OPEN_TOKEN_TYPES or token.type == "list_item_close":
            awaiting_level = None
            if pending is not None:
                item = pending.finish()
                if item is not None:
                    items.append(item)
                pending = None
        elif token.type == "paragraph_open" and index + 1 < len(tokens):
            inline = tokens[index + 1]
            if awaiting_level is not None:
                # Only an item that opens with a paragraph can carry a task marker.
                pending = _start_item(token, inline, awaiting_level)
                awaiting_level = None
            elif pending is not None and token.level == pending.level + 1 and token.map:
                pending.parts.append(_inline_text(inline.children or []))
                pending.end_line = token.map[1]
        elif awaiting_level is not None and token.nesting >= 0 and token.type != "inline":
            # Fences, headings and other blocks opening an item.
            awaiting_level = None
    logger.debug("Parsed checklist", item_count=len(items))
    return items


def serialize_todo_markdown(items: Sequence[TodoItem]) -> str:
    """Render checklist items as a flat markdown task list, one line per item."""
    lines: list[str] = []
    for item in items:
        checkbox = "[x]" if item.is_checked else "[ ]"
        text = item.text
        if item.issue_number is not None:
            text = f"{text} (#{item.issue_number})"
        lines.append(f"- {checkbox} {text}\n")
    return "".join(lines)


def _replace_checkbox(line: str, is_checked: bool) -> str:
    match = TASK_LINE_PATTERN.match(line)
    if match is None:
        return line
    mark = "x" if is_checked else " "
    return f"{line[: match.start('mark')]}{mark}{line[match.end('mark') :]}"


def _replace_issue_reference(line: str, old_number: int | None, new_number: int) -> str:
    body = line.rstrip()
    trailing = line[len(body) :]
    reference = f"{ISSUE_REFERENCE_PREFIX}{new_number})"
    if old_number is not None:
        old_reference = f"{ISSUE_REFERENCE_PREFIX}{old_number})"
        position = body.rfind(old_reference)
        if position != -1:
            return f"{body[:position]}{reference}{body[position + len(old_reference) :]}{trailing}"
    return f"{body}{reference}{trailing}"


def update_todo_markdown(content: str, items: Sequence[TodoItem]) -> str:
    """Write checklist changes back into the document they were parsed from.

    Items parsed from `content` are edited where they stand: a changed checkbox
    is rewritten on the item's first line and a new issue reference is appended
    to its last line. Every other byte of the document is kept. Items that are
    not part of `content` are appended at the end as new task-list lines.
    """
    lines = content.split("\n")
    parsed_items = {item.source_lines: item for item in parse_todo_markdown(content)}
    new_items: list[TodoItem] = []
    edited_count = 0
    for item in items:
        original = parsed_items.get(item.source_lines) if item.source_lines is not None else None
        if original is None or item.source_lines is None:
            new_items.append(item)
            continue
        first_line, end_line = item.source_lines
        if item.is_checked != original.is_checked:
            lines[first_line] = _replace_checkbox(lines[first_line], item.is_checked)
            edited_count += 1
        if item.issue_number is not None and item.issue_number != original.issue_number:
            lines[end_line - 1] = _replace_issue_reference(lines[end_line - 1], original.issue_number, item.issue_number)
            edited_count += 1

    updated = "\n".join(lines)
    if new_items:
        if updated and not updated.endswith("\n"):
            updated += "\n"
        updated += serialize_todo_markdown(new_items)
    logger.debug("Updated checklist document", edited_count=edited_count, appended_count=len(new_items))
    return updated
