"""Service for todo operations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

import pydantic

from ..errors import ValidationError
from ..models import Todo, TodoDraft, TodoUpdate
from ..positions import (
    index_of,
    insert_at,
    move_across_lists,
    move_within_list,
    ordered_ids,
    remove_by_id,
)
from ..repositories import RepositoryProtocol
from ..store import EntityStore
from ..utils import provisional_id
from .mutation import MutationRunner, replace_todos, require_text, swap_id

logger = logging.getLogger(__name__)

# Fields a todo always has; an update may change them but never clear them
REQUIRED_UPDATE_FIELDS = ("tags", "is_completed", "category_id")


class TodoService:
    """Service for todo operations.

    Shares its ``MutationRunner`` (and so its store and lock) with the
    ``BoardService`` of the same board.
    """

    def __init__(self, repository: RepositoryProtocol, runner: MutationRunner) -> None:
        self.repository = repository
        self.runner = runner

    @property
    def store(self) -> EntityStore:
        return self.runner.store

    async def add_todo(
        self,
        category_id: str,
        content: str,
        *,
        description: str | None = None,
        due_date: date | None = None,
        tags: list[str] | None = None,
    ) -> Todo:
        """
        Add a todo at the top of a category.

        The new todo takes position 0 and every sibling shifts down by one.
        """
        draft = TodoDraft(
            content=require_text(content, "Todo content"),
            description=description,
            due_date=due_date,
            tags=tags or [],
            category_id=category_id,
            position=0,
        )

        async with self.runner.operation("add todo", "Todo added successfully") as op:
            category = self.store.get_category(category_id)
            provisional = draft.with_id(provisional_id())
            op.apply(replace_todos(op.state, category_id, insert_at(category.todos, provisional, 0)))

            todo_id = await self.repository.create_todo(category_id, draft)
            todos = self.store.get_category(category_id).todos
            op.apply(replace_todos(op.state, category_id, swap_id(todos, provisional.id, todo_id)))

        logger.info("Todo added: %s in %s", todo_id, category_id)
        return self.store.find_todo(category_id, todo_id)

    async def update_todo(
        self,
        todo_id: str,
        current_category_id: str,
        updates: TodoUpdate | Mapping[str, Any],
    ) -> Todo:
        """
        Apply a partial update to a todo.

        A ``category_id`` that differs from ``current_category_id`` re-parents
        the todo: it is removed from its category and appended to the end of
        the destination, and both categories are renumbered.
        """
        updates = self._coerce_update(updates)
        changes = updates.changes()
        dest_id = changes.pop("category_id", None) or current_category_id
        document = updates.to_document(exclude={"category_id"})

        if not changes and dest_id == current_category_id:
            logger.debug("update_todo: nothing to change for %s", todo_id)
            return self.store.find_todo(current_category_id, todo_id)

        async with self.runner.operation("update todo", "Todo updated successfully") as op:
            source = self.store.get_category(current_category_id)
            todo = self.store.find_todo(current_category_id, todo_id)
            edited = todo.model_copy(update=changes)

            if dest_id == current_category_id:
                todos = [edited if t.id == todo_id else t for t in source.todos]
                op.apply(replace_todos(op.state, current_category_id, todos))
                await self.repository.update_todo(todo_id, document)
            else:
                dest = self.store.get_category(dest_id)
                new_source = remove_by_id(source.todos, todo_id)
                new_dest = insert_at(
                    dest.todos, edited.model_copy(update={"category_id": dest_id}), len(dest.todos)
                )
                state = replace_todos(op.state, current_category_id, new_source)
                op.apply(replace_todos(state, dest_id, new_dest))
                await self.repository.move_todo_across_categories(
                    current_category_id,
                    dest_id,
                    todo_id,
                    len(new_dest) - 1,
                    ordered_ids(new_source),
                    ordered_ids(new_dest),
                    fields=document,
                )
                logger.info("Todo re-parented: %s (%s -> %s)", todo_id, current_category_id, dest_id)

        return self.store.find_todo(dest_id, todo_id)

    async def toggle_todo(self, category_id: str, todo_id: str) -> Todo:
        """Flip a todo's completed flag."""
        async with self.runner.operation("update todo", "Todo updated successfully") as op:
            category = self.store.get_category(category_id)
            todo = self.store.find_todo(category_id, todo_id)
            toggled = todo.model_copy(update={"is_completed": not todo.is_completed})
            todos = [toggled if t.id == todo_id else t for t in category.todos]
            op.apply(replace_todos(op.state, category_id, todos))
            await self.repository.update_todo(todo_id, {"isCompleted": toggled.is_completed})

        return self.store.find_todo(category_id, todo_id)

    async def delete_todo(self, category_id: str, todo_id: str) -> None:
        """Delete a todo and renumber the rest of its category."""
        async with self.runner.operation("delete todo", "Todo deleted successfully") as op:
            category = self.store.get_category(category_id)
            op.apply(replace_todos(op.state, category_id, remove_by_id(category.todos, todo_id)))
            await self.repository.delete_todo(category_id, todo_id)

        logger.info("Todo deleted: %s from %s", todo_id, category_id)

    async def move_todo(
        self,
        source_category_id: str,
        dest_category_id: str,
        todo_id: str,
        dest_index: int,
    ) -> Todo:
        """
        Drag a todo to ``dest_index`` of a category (its own or another).

        ``dest_index`` uses drag-and-drop semantics and is clamped, so any
        index past the end appends. On failure the store snaps back to the
        pre-drag state.
        """
        async with self.runner.operation(
            "update todo position", "Todo position updated successfully"
        ) as op:
            source = self.store.get_category(source_category_id)
            dest = self.store.get_category(dest_category_id)
            from_index = index_of(source.todos, todo_id)

            if source.id == dest.id:
                target = max(0, min(dest_index, len(source.todos) - 1))
                if target == from_index:
                    op.quiet = True
                    return self.store.find_todo(source_category_id, todo_id)
                todos = move_within_list(source.todos, from_index, target)
                op.apply(replace_todos(op.state, source.id, todos))
                await self.repository.reindex_positions(source.id, ordered_ids(todos))
            else:
                new_source, new_dest = move_across_lists(
                    source.todos, dest.todos, todo_id, dest_index, dest.id
                )
                state = replace_todos(op.state, source.id, new_source)
                op.apply(replace_todos(state, dest.id, new_dest))
                await self.repository.move_todo_across_categories(
                    source.id,
                    dest.id,
                    todo_id,
                    index_of(new_dest, todo_id),
                    ordered_ids(new_source),
                    ordered_ids(new_dest),
                )

        logger.debug("Todo moved: %s (%s -> %s)", todo_id, source_category_id, dest_category_id)
        return self.store.find_todo(dest_category_id, todo_id)

    # --- Private Methods ---

    @staticmethod
    def _coerce_update(updates: TodoUpdate | Mapping[str, Any]) -> TodoUpdate:
        """Validate raw updates and normalize content."""
        if not isinstance(updates, TodoUpdate):
            try:
                updates = TodoUpdate.model_validate(dict(updates))
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid todo update: {e}") from e

        for name in REQUIRED_UPDATE_FIELDS:
            if name in updates.model_fields_set and getattr(updates, name) is None:
                raise ValidationError(f"Invalid todo update: {name} cannot be null")

        if "content" in updates.model_fields_set:
            content = require_text(updates.content or "", "Todo content")
            updates = updates.model_copy(update={"content": content})
        return updates
