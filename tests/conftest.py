"""Shared fixtures for todoboard tests."""

import asyncio

import pytest

from todoboard.models import Category, Todo
from todoboard.repositories import InMemoryRepository
from todoboard.services import BoardService, MutationRunner, Notice, TodoService


def make_todo(todo_id: str, category_id: str, position: int, **fields) -> Todo:
    """Build a todo whose content defaults to an upper-cased id."""
    fields.setdefault("content", todo_id.upper())
    return Todo(id=todo_id, category_id=category_id, position=position, **fields)


def make_category(category_id: str, title: str, position: int, todo_ids=()) -> Category:
    """Build a category holding dense todos with the given ids."""
    return Category(
        id=category_id,
        title=title,
        position=position,
        todos=[make_todo(todo_id, category_id, i) for i, todo_id in enumerate(todo_ids)],
    )


def sample_board() -> list[Category]:
    """Backlog [t1, t2], Doing [t3], Done []."""
    return [
        make_category("backlog", "Backlog", 0, ["t1", "t2"]),
        make_category("doing", "Doing", 1, ["t3"]),
        make_category("done", "Done", 2),
    ]


@pytest.fixture
def notices() -> list[Notice]:
    """Collects every notice the runner emits."""
    return []


@pytest.fixture
def repo() -> InMemoryRepository:
    """In-memory repository seeded with the sample board."""
    return InMemoryRepository(sample_board())


@pytest.fixture
def runner(notices: list[Notice]) -> MutationRunner:
    return MutationRunner(notifier=notices.append)


@pytest.fixture
def board(repo: InMemoryRepository, runner: MutationRunner) -> BoardService:
    """BoardService with the sample board already loaded."""
    service = BoardService(repo, runner)
    asyncio.run(service.refresh())
    return service


@pytest.fixture
def todos(board: BoardService, repo: InMemoryRepository) -> TodoService:
    """TodoService sharing the loaded board's runner."""
    return TodoService(repo, board.runner)
