"""In-memory entity store for the board."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from .errors import NotFoundError
from .models import Category, Todo

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[Category, ...]], None]


class EntityStore:
    """Owns the canonical category/todo graph the view renders from.

    There is no partial-update API: callers compute a whole new state and
    swap it in with ``replace``.
    """

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: tuple[Category, ...] = tuple(categories)
        self._listeners: list[Listener] = []

    @property
    def categories(self) -> tuple[Category, ...]:
        """Current categories, ascending by position."""
        return self._categories

    def replace(self, new_state: Iterable[Category]) -> None:
        """Atomically swap in a new state and notify subscribers."""
        self._categories = tuple(new_state)
        logger.debug("Store replaced: %d categories", len(self._categories))
        for listener in list(self._listeners):
            listener(self._categories)

    def snapshot(self) -> tuple[Category, ...]:
        """Deep copy of the current state, independent of later changes."""
        return tuple(category.model_copy(deep=True) for category in self._categories)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every replace. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Lookups ---

    def get_category(self, category_id: str) -> Category:
        """Get a category by id.

        Raises:
            NotFoundError: No such category.
        """
        for category in self._categories:
            if category.id == category_id:
                return category
        raise NotFoundError(f"Category not found: {category_id}")

    def find_todo(self, category_id: str, todo_id: str) -> Todo:
        """Get a todo within a specific category.

        Raises:
            NotFoundError: The category does not exist or does not hold the todo.
        """
        todo = self.get_category(category_id).find_todo(todo_id)
        if todo is None:
            raise NotFoundError(f"Todo {todo_id} not found in category {category_id}")
        return todo
