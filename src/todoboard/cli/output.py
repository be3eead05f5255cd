"""Colorful CLI output for boards and notices."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Category, Todo
    from ..services import Notice

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"
CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗


def _colorize(text: str, color: str) -> str:
    """Apply color only when stdout is a terminal."""
    if getattr(sys.stdout, "isatty", None) and sys.stdout.isatty():
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    """Print success message with green checkmark."""
    print(f"{_colorize(CHECK, GREEN)} {message}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    print(f"{_colorize(BULLET, YELLOW)} {message}")


def error(message: str) -> None:
    """Print error message with red cross."""
    print(f"{_colorize(CROSS, RED)} {message}")


def notice(item: Notice) -> None:
    """Print an operation notice; usable directly as a runner notifier."""
    if item.level == "error":
        error(item.message)
    else:
        success(item.message)


def format_todo(todo: Todo) -> str:
    """One-line rendering of a todo."""
    box = "[x]" if todo.is_completed else "[ ]"
    parts = [f"{box} {todo.content}"]
    if todo.due_date:
        parts.append(f"due {todo.due_date.isoformat()}")
    if todo.tags:
        parts.append(" ".join(f"#{tag}" for tag in todo.tags))
    parts.append(_colorize(f"({todo.id})", DIM))
    return "  ".join(parts)


def board(categories: Iterable[Category]) -> None:
    """Print every category as a column heading followed by its todos."""
    shown = False
    for category in categories:
        shown = True
        heading = f"{category.title} ({len(category.todos)})"
        print(f"{_colorize(heading, BLUE)} {_colorize(category.id, DIM)}")
        for todo in category.todos:
            print(f"  {format_todo(todo)}")
            if todo.description:
                print(f"      {todo.description}")
    if not shown:
        info("Board is empty")
