"""Tests for HttpRepository."""

import asyncio
import json

import httpx
import pytest

from todoboard.errors import NotFoundError, PersistenceError, TransactionConflictError
from todoboard.models import TodoDraft
from todoboard.repositories import HttpRepository
from todoboard.services import BoardService, MutationRunner, TodoService

BASE_URL = "https://store.test/api"


class FakeStore:
    """Records requests and answers them from a route table."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path.removeprefix("/api"))
        handler = self.routes.get(key, httpx.Response(204))
        if callable(handler):
            return handler(request)
        return handler

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1):
        return json.loads(self.requests[index].content)


def make_repo(store: FakeStore, token: str | None = None) -> HttpRepository:
    return HttpRepository(BASE_URL, token, transport=httpx.MockTransport(store))


def call(repo: HttpRepository, method: str, *args, **kwargs):
    async def run():
        async with repo:
            return await getattr(repo, method)(*args, **kwargs)

    return asyncio.run(run())


class TestHttpRepositoryReads:
    """Tests for listing categories and todos."""

    def test_list_categories(self):
        store = FakeStore(
            {
                ("GET", "/categories"): httpx.Response(
                    200, json=[{"id": "c1", "title": "Todo", "position": 0}]
                )
            }
        )

        [category] = call(make_repo(store), "list_categories")

        assert category.id == "c1"
        assert category.todos == []
        assert store.last.url.params["orderBy"] == "position"

    def test_list_todos_reads_camel_case(self):
        store = FakeStore(
            {
                ("GET", "/categories/c1/todos"): httpx.Response(
                    200,
                    json=[
                        {
                            "id": "t1",
                            "content": "Ship",
                            "isCompleted": True,
                            "dueDate": "2024-02-01",
                            "categoryId": "c1",
                            "position": 0,
                        }
                    ],
                )
            }
        )

        [todo] = call(make_repo(store), "list_todos", "c1")

        assert todo.is_completed is True
        assert todo.due_date.isoformat() == "2024-02-01"

    def test_bearer_token(self):
        store = FakeStore({("GET", "/categories"): httpx.Response(200, json=[])})

        call(make_repo(store, token="secret"), "list_categories")

        assert store.last.headers["Authorization"] == "Bearer secret"

    def test_no_token_no_header(self):
        store = FakeStore({("GET", "/categories"): httpx.Response(200, json=[])})

        call(make_repo(store), "list_categories")

        assert "Authorization" not in store.last.headers


class TestHttpRepositoryWrites:
    """Tests for the write endpoints."""

    def test_create_category_returns_id(self):
        store = FakeStore({("POST", "/categories"): httpx.Response(201, json={"id": "c9"})})

        category_id = call(make_repo(store), "create_category", "Review")

        assert category_id == "c9"
        assert store.body() == {"title": "Review"}

    def test_create_without_id_fails(self):
        store = FakeStore({("POST", "/categories"): httpx.Response(201, json={})})

        with pytest.raises(PersistenceError, match="did not return an id"):
            call(make_repo(store), "create_category", "Review")

    def test_create_todo_document(self):
        store = FakeStore(
            {("POST", "/categories/c1/todos"): httpx.Response(201, json={"id": "t9"})}
        )
        draft = TodoDraft(content="Ship", category_id="c1", tags=["a"])

        todo_id = call(make_repo(store), "create_todo", "c1", draft)

        assert todo_id == "t9"
        assert store.body() == {
            "content": "Ship",
            "isCompleted": False,
            "description": None,
            "dueDate": None,
            "tags": ["a"],
            "categoryId": "c1",
            "position": 0,
        }

    def test_update_todo_sends_fields(self):
        store = FakeStore()

        call(make_repo(store), "update_todo", "t1", {"isCompleted": True})

        assert store.last.method == "PATCH"
        assert store.last.url.path == "/api/todos/t1"
        assert store.body() == {"isCompleted": True}

    def test_reorder_categories(self):
        store = FakeStore()

        call(make_repo(store), "reorder_categories", ["b", "a"])

        assert store.last.method == "PUT"
        assert store.last.url.path == "/api/categories/order"
        assert store.body() == {"ids": ["b", "a"]}

    def test_reindex_positions(self):
        store = FakeStore()

        call(make_repo(store), "reindex_positions", "c1", ["t2", "t1"])

        assert store.last.url.path == "/api/categories/c1/todos/order"
        assert store.body() == {"ids": ["t2", "t1"]}

    def test_delete_todo(self):
        store = FakeStore()

        call(make_repo(store), "delete_todo", "c1", "t1")

        assert store.last.method == "DELETE"
        assert store.last.url.path == "/api/categories/c1/todos/t1"

    def test_move_is_single_transaction_request(self):
        store = FakeStore()

        call(
            make_repo(store),
            "move_todo_across_categories",
            "c1",
            "c2",
            "t1",
            0,
            ["t2"],
            ["t1", "t3"],
        )

        assert len(store.requests) == 1
        assert store.last.url.path == "/api/transactions/move-todo"
        assert store.body() == {
            "fromCategoryId": "c1",
            "toCategoryId": "c2",
            "todoId": "t1",
            "destIndex": 0,
            "sourceOrder": ["t2"],
            "destOrder": ["t1", "t3"],
            "fields": {},
        }


class TestHttpRepositoryErrors:
    """Tests for mapping HTTP failures onto board errors."""

    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (404, NotFoundError),
            (409, TransactionConflictError),
            (500, PersistenceError),
            (403, PersistenceError),
        ],
    )
    def test_status_mapping(self, status, error):
        store = FakeStore({("PATCH", "/categories/c1"): httpx.Response(status, text="nope")})

        with pytest.raises(error):
            call(make_repo(store), "update_category", "c1", "Title")

    def test_conflict_is_persistence_error(self):
        assert issubclass(TransactionConflictError, PersistenceError)

    def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = FakeStore({("GET", "/categories"): refuse})

        with pytest.raises(PersistenceError, match="Request failed"):
            call(make_repo(store), "list_categories")

    def test_timeout(self):
        def slow(request):
            raise httpx.ReadTimeout("too slow", request=request)

        store = FakeStore({("GET", "/categories"): slow})

        with pytest.raises(PersistenceError, match="timed out"):
            call(make_repo(store), "list_categories")

    def test_invalid_json(self):
        store = FakeStore({("GET", "/categories"): httpx.Response(200, text="<html>")})

        with pytest.raises(PersistenceError, match="Invalid JSON"):
            call(make_repo(store), "list_categories")


class TestHttpRepositoryWithServices:
    """End-to-end: a rejected remote write snaps the board back."""

    def test_rejected_move_rolls_back(self):
        store = FakeStore(
            {
                ("GET", "/categories"): httpx.Response(
                    200,
                    json=[
                        {"id": "c1", "title": "Backlog", "position": 0},
                        {"id": "c2", "title": "Doing", "position": 1},
                    ],
                ),
                ("GET", "/categories/c1/todos"): httpx.Response(
                    200,
                    json=[{"id": "t1", "content": "A", "categoryId": "c1", "position": 0}],
                ),
                ("GET", "/categories/c2/todos"): httpx.Response(200, json=[]),
                ("POST", "/transactions/move-todo"): httpx.Response(409, text="aborted"),
            }
        )
        notices = []
        runner = MutationRunner(notifier=notices.append)

        async def scenario():
            async with make_repo(store) as repo:
                board = BoardService(repo, runner)
                todos = TodoService(repo, runner)
                await board.refresh()
                with pytest.raises(TransactionConflictError):
                    await todos.move_todo("c1", "c2", "t1", 0)
                return board

        board = asyncio.run(scenario())

        assert [t.id for t in board.store.get_category("c1").todos] == ["t1"]
        assert board.store.get_category("c2").todos == []
        assert notices[-1].level == "error"
