"""Service layer for board operations."""

from .board_service import BoardService
from .filter_service import FilterService
from .mutation import MutationRunner, Notice, Notifier
from .todo_service import TodoService

__all__ = [
    "BoardService",
    "FilterService",
    "MutationRunner",
    "Notice",
    "Notifier",
    "TodoService",
]
