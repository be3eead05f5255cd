"""Repository protocol for remote board storage."""

from typing import Any, Protocol

from ..models import Category, Todo, TodoDraft


class RepositoryProtocol(Protocol):
    """Interface for durable storage of categories and todos.

    Categories and todos are separate documents keyed by id; todos live under
    their category. All methods are coroutines. Implementations raise only
    ``BoardError`` subclasses for storage failures:

    - ``NotFoundError`` when a referenced id does not exist
    - ``TransactionConflictError`` when an atomic multi-document write aborts
    - ``PersistenceError`` for anything else the store rejects

    Methods documented as atomic must leave the store untouched when they fail.
    """

    async def list_categories(self) -> list[Category]:
        """Load all categories, ascending by position, with empty ``todos``."""
        ...

    async def list_todos(self, category_id: str) -> list[Todo]:
        """Load the todos of a category, ascending by position."""
        ...

    async def create_category(self, title: str) -> str:
        """Append a category at the end and return its durable id."""
        ...

    async def update_category(self, category_id: str, title: str) -> None:
        """Rename a category."""
        ...

    async def delete_category(self, category_id: str) -> None:
        """Delete a category and all of its todos.

        The remaining categories are renumbered to dense positions in the
        same atomic write.
        """
        ...

    async def reorder_categories(self, ordered_ids: list[str]) -> None:
        """Atomically set each category's position to its index in ``ordered_ids``."""
        ...

    async def create_todo(self, category_id: str, draft: TodoDraft) -> str:
        """Insert a todo at ``draft.position`` and return its durable id.

        Siblings at or after that position shift up by one in the same
        atomic write.
        """
        ...

    async def update_todo(self, todo_id: str, fields: dict[str, Any]) -> None:
        """Apply camelCase document ``fields`` to a todo in place.

        Raises:
            NotFoundError: No todo with that id.
        """
        ...

    async def delete_todo(self, category_id: str, todo_id: str) -> None:
        """Delete a todo and renumber its remaining siblings atomically."""
        ...

    async def reindex_positions(self, category_id: str, ordered_ids: list[str]) -> None:
        """Atomically set each listed todo's position to its index."""
        ...

    async def move_todo_across_categories(
        self,
        from_category_id: str,
        to_category_id: str,
        todo_id: str,
        dest_index: int,
        source_order: list[str],
        dest_order: list[str],
        fields: dict[str, Any] | None = None,
    ) -> None:
        """Re-parent a todo in one transaction.

        Deletes the todo document under the source category, recreates it
        under the destination with its new ``categoryId``, ``position`` and
        any extra camelCase ``fields``, and rewrites sibling positions on
        both sides from ``source_order`` and ``dest_order``. On failure
        nothing is written: the todo is never duplicated or lost.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...
