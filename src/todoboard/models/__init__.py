"""Data models."""

from .category import Category
from .todo import Todo, TodoDraft, TodoUpdate

__all__ = [
    "Category",
    "Todo",
    "TodoDraft",
    "TodoUpdate",
]
