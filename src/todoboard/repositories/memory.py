"""In-memory document repository."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from ..errors import NotFoundError
from ..models import Category, Todo, TodoDraft
from ..utils import new_id

logger = logging.getLogger(__name__)

Document = dict[str, Any]


@dataclass
class Documents:
    """Raw document state: category docs and, per category, todo docs.

    Documents are stored the way a document database would hold them:
    camelCase fields, no ``id`` inside the document itself.
    """

    categories: dict[str, Document] = field(default_factory=dict)
    todos: dict[str, dict[str, Document]] = field(default_factory=dict)


def _by_position(docs: dict[str, Document]) -> list[str]:
    """Document ids sorted by position, then id."""
    return sorted(docs, key=lambda doc_id: (docs[doc_id].get("position", 0), doc_id))


def _renumber(docs: dict[str, Document]) -> None:
    for index, doc_id in enumerate(_by_position(docs)):
        docs[doc_id]["position"] = index


class InMemoryRepository:
    """
    Repository that keeps all documents in process memory.

    Every write runs inside a copy-on-write transaction: the documents are
    copied, modified, and only swapped in (via ``_commit``) when the whole
    write succeeded, so multi-document operations are all-or-nothing.
    """

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._docs = self._to_documents(categories)

    # --- Reads ---

    async def list_categories(self) -> list[Category]:
        docs = self._docs.categories
        return [
            Category(id=category_id, title=docs[category_id]["title"], position=index)
            for index, category_id in enumerate(_by_position(docs))
        ]

    async def list_todos(self, category_id: str) -> list[Todo]:
        todos = self._require_category(self._docs, category_id)
        return [Todo(id=todo_id, **todos[todo_id]) for todo_id in _by_position(todos)]

    # --- Category writes ---

    async def create_category(self, title: str) -> str:
        category_id = new_id()
        with self._transaction() as docs:
            docs.categories[category_id] = {"title": title, "position": len(docs.categories)}
            docs.todos[category_id] = {}
        logger.debug("Category document created: %s", category_id)
        return category_id

    async def update_category(self, category_id: str, title: str) -> None:
        with self._transaction() as docs:
            self._require_category(docs, category_id)
            docs.categories[category_id]["title"] = title

    async def delete_category(self, category_id: str) -> None:
        with self._transaction() as docs:
            todos = self._require_category(docs, category_id)
            del docs.categories[category_id]
            del docs.todos[category_id]
            _renumber(docs.categories)
        logger.debug("Category document deleted: %s (%d todos)", category_id, len(todos))

    async def reorder_categories(self, ordered_ids: list[str]) -> None:
        with self._transaction() as docs:
            for index, category_id in enumerate(ordered_ids):
                self._require_category(docs, category_id)
                docs.categories[category_id]["position"] = index

    # --- Todo writes ---

    async def create_todo(self, category_id: str, draft: TodoDraft) -> str:
        todo_id = new_id()
        with self._transaction() as docs:
            todos = self._require_category(docs, category_id)
            position = min(draft.position, len(todos))
            for doc in todos.values():
                if doc["position"] >= position:
                    doc["position"] += 1
            document = draft.to_document()
            document.update(categoryId=category_id, position=position)
            todos[todo_id] = document
        logger.debug("Todo document created: %s in %s", todo_id, category_id)
        return todo_id

    async def update_todo(self, todo_id: str, fields: dict[str, Any]) -> None:
        with self._transaction() as docs:
            category_id = self._locate_todo(docs, todo_id)
            target_id = fields.get("categoryId", category_id)
            if target_id == category_id:
                docs.todos[category_id][todo_id].update(fields)
                return
            # Re-parenting through a plain update appends to the destination
            dest = self._require_category(docs, target_id)
            document = docs.todos[category_id].pop(todo_id)
            document.update(fields)
            document["position"] = len(dest)
            dest[todo_id] = document
            _renumber(docs.todos[category_id])

    async def delete_todo(self, category_id: str, todo_id: str) -> None:
        with self._transaction() as docs:
            todos = self._require_category(docs, category_id)
            if todo_id not in todos:
                raise NotFoundError(f"Todo {todo_id} not found in category {category_id}")
            del todos[todo_id]
            _renumber(todos)

    async def reindex_positions(self, category_id: str, ordered_ids: list[str]) -> None:
        with self._transaction() as docs:
            todos = self._require_category(docs, category_id)
            self._apply_order(todos, ordered_ids, category_id)

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
        with self._transaction() as docs:
            source = self._require_category(docs, from_category_id)
            dest = self._require_category(docs, to_category_id)
            if todo_id not in source:
                raise NotFoundError(f"Todo {todo_id} not found in category {from_category_id}")

            document = source.pop(todo_id)
            document.update(fields or {})
            document.update(categoryId=to_category_id, position=dest_index)
            dest[todo_id] = document

            if todo_id not in dest_order:
                dest_order = list(dest_order)
                dest_order.insert(max(0, min(dest_index, len(dest_order))), todo_id)
            self._apply_order(source, source_order, from_category_id)
            self._apply_order(dest, dest_order, to_category_id)
        logger.debug("Todo %s moved: %s -> %s", todo_id, from_category_id, to_category_id)

    async def close(self) -> None:
        pass

    # --- Snapshot helpers ---

    def to_categories(self) -> list[Category]:
        """Materialize the full category/todo graph, ordered by position."""
        docs = self._docs
        return [
            Category(
                id=category_id,
                title=docs.categories[category_id]["title"],
                position=docs.categories[category_id]["position"],
                todos=[
                    Todo(id=todo_id, **docs.todos[category_id][todo_id])
                    for todo_id in _by_position(docs.todos[category_id])
                ],
            )
            for category_id in _by_position(docs.categories)
        ]

    # --- Private Methods ---

    @staticmethod
    def _to_documents(categories: Iterable[Category]) -> Documents:
        docs = Documents()
        for category in categories:
            docs.categories[category.id] = {"title": category.title, "position": category.position}
            docs.todos[category.id] = {
                todo.id: {**todo.to_document(), "categoryId": category.id}
                for todo in category.todos
            }
        return docs

    @contextmanager
    def _transaction(self) -> Iterator[Documents]:
        """Yield a working copy of the documents; commit it if no error escapes."""
        working = copy.deepcopy(self._docs)
        yield working
        self._commit(working)

    def _commit(self, docs: Documents) -> None:
        """Make ``docs`` the current state."""
        self._docs = docs

    @staticmethod
    def _require_category(docs: Documents, category_id: str) -> dict[str, Document]:
        if category_id not in docs.categories:
            raise NotFoundError(f"Category not found: {category_id}")
        return docs.todos.setdefault(category_id, {})

    @staticmethod
    def _locate_todo(docs: Documents, todo_id: str) -> str:
        for category_id, todos in docs.todos.items():
            if todo_id in todos:
                return category_id
        raise NotFoundError(f"Todo not found: {todo_id}")

    @staticmethod
    def _apply_order(todos: dict[str, Document], ordered_ids: list[str], category_id: str) -> None:
        for index, todo_id in enumerate(ordered_ids):
            if todo_id not in todos:
                raise NotFoundError(f"Todo {todo_id} not found in category {category_id}")
            todos[todo_id]["position"] = index
