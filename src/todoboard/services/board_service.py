"""Service for category operations and board loading."""

from __future__ import annotations

import logging

from ..models import Category
from ..positions import (
    index_of,
    insert_at,
    move_within_list,
    ordered_ids,
    remove_by_id,
    sort_by_position,
)
from ..repositories import RepositoryProtocol
from ..store import EntityStore
from ..utils import provisional_id
from .filter_service import FilterService
from .mutation import MutationRunner, replace_category, require_text, swap_id

logger = logging.getLogger(__name__)


class BoardService:
    """Service for category operations and board loading."""

    def __init__(
        self,
        repository: RepositoryProtocol,
        runner: MutationRunner | None = None,
        filter_service: FilterService | None = None,
    ) -> None:
        self.repository = repository
        self.runner = runner or MutationRunner()
        self._filter_service = filter_service or FilterService()

    @property
    def store(self) -> EntityStore:
        return self.runner.store

    @property
    def categories(self) -> tuple[Category, ...]:
        return self.store.categories

    async def refresh(self) -> tuple[Category, ...]:
        """
        Reload every category and its todos from the repository.

        There is no optimistic phase: the store is only replaced once the
        whole board was fetched, so a failure leaves the previous state.
        """
        async with self.runner.operation("load board") as op:
            categories = []
            for category in sort_by_position(await self.repository.list_categories()):
                todos = sort_by_position(await self.repository.list_todos(category.id))
                categories.append(category.model_copy(update={"todos": todos}))
            op.apply(categories)
        logger.info("Board loaded: %d categories", len(categories))
        return self.categories

    async def add_category(self, title: str) -> Category:
        """
        Append a new category.

        Shown immediately under a provisional id, which is swapped for the
        durable id once the repository has created the document.
        """
        title = require_text(title, "Category title")

        async with self.runner.operation("add category", "Category added successfully") as op:
            provisional = Category(id=provisional_id(), title=title, position=len(op.state))
            op.apply(insert_at(op.state, provisional, len(op.state)))

            category_id = await self.repository.create_category(title)
            op.apply(swap_id(op.state, provisional.id, category_id))

        logger.info("Category added: %s (%s)", category_id, title)
        return self.store.get_category(category_id)

    async def update_category(self, category_id: str, title: str) -> Category:
        """Rename a category in place."""
        title = require_text(title, "Category title")

        async with self.runner.operation("update category", "Category updated successfully") as op:
            current = self.store.get_category(category_id)
            op.apply(replace_category(op.state, current.model_copy(update={"title": title})))
            await self.repository.update_category(category_id, title)

        return self.store.get_category(category_id)

    async def delete_category(self, category_id: str) -> None:
        """Delete a category with all its todos and renumber the rest."""
        async with self.runner.operation("delete category", "Category deleted successfully") as op:
            remaining = remove_by_id(op.state, category_id)
            op.apply(remaining)
            await self.repository.delete_category(category_id)

        logger.info("Category deleted: %s", category_id)

    async def move_category(self, category_id: str, to_index: int) -> Category:
        """Move a category to ``to_index`` (clamped) and renumber all categories."""
        async with self.runner.operation(
            "move category", "Category position updated successfully"
        ) as op:
            from_index = index_of(op.state, category_id)
            target = max(0, min(to_index, len(op.state) - 1))
            if target == from_index:
                op.quiet = True
            else:
                reordered = move_within_list(op.state, from_index, target)
                op.apply(reordered)
                await self.repository.reorder_categories(ordered_ids(reordered))
                logger.debug("Category %s moved: %d -> %d", category_id, from_index, target)

        return self.store.get_category(category_id)

    def search(self, term: str, *, matching_only: bool = False) -> list[Category]:
        """Categories with todos matching ``term``; see ``FilterService.apply``."""
        return self._filter_service.apply(self.categories, term, matching_only=matching_only)
