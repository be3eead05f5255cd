"""HTTP repository for a remote JSON document store."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..errors import NotFoundError, PersistenceError, TransactionConflictError
from ..models import Category, Todo, TodoDraft

logger = logging.getLogger(__name__)


class HttpRepository:
    """Repository talking to a remote document API over HTTP.

    Provides a thin async wrapper around the store's REST endpoints with:
    - Bearer token authentication
    - Mapping of HTTP failures onto the board error hierarchy
    - Request timing in the logs

    Atomic operations (cascading deletes, reorders, cross-category moves) are
    single requests; the server runs each one as a transaction.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the repository.

        Args:
            base_url: Root URL of the document API (e.g. https://store.example/api)
            token: Optional bearer token
            timeout: Per-request timeout in seconds
            transport: Custom transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpRepository:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # --- Reads ---

    async def list_categories(self) -> list[Category]:
        data = await self._request("GET", "/categories", params={"orderBy": "position"})
        return [Category.model_validate({**item, "todos": []}) for item in data or []]

    async def list_todos(self, category_id: str) -> list[Todo]:
        data = await self._request(
            "GET", f"/categories/{category_id}/todos", params={"orderBy": "position"}
        )
        return [Todo.model_validate(item) for item in data or []]

    # --- Category writes ---

    async def create_category(self, title: str) -> str:
        data = await self._request("POST", "/categories", json={"title": title})
        return self._created_id(data)

    async def update_category(self, category_id: str, title: str) -> None:
        await self._request("PATCH", f"/categories/{category_id}", json={"title": title})

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", f"/categories/{category_id}")

    async def reorder_categories(self, ordered_ids: list[str]) -> None:
        await self._request("PUT", "/categories/order", json={"ids": ordered_ids})

    # --- Todo writes ---

    async def create_todo(self, category_id: str, draft: TodoDraft) -> str:
        document = {**draft.to_document(), "categoryId": category_id}
        data = await self._request("POST", f"/categories/{category_id}/todos", json=document)
        return self._created_id(data)

    async def update_todo(self, todo_id: str, fields: dict[str, Any]) -> None:
        await self._request("PATCH", f"/todos/{todo_id}", json=fields)

    async def delete_todo(self, category_id: str, todo_id: str) -> None:
        await self._request("DELETE", f"/categories/{category_id}/todos/{todo_id}")

    async def reindex_positions(self, category_id: str, ordered_ids: list[str]) -> None:
        await self._request(
            "PUT", f"/categories/{category_id}/todos/order", json={"ids": ordered_ids}
        )

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
        payload = {
            "fromCategoryId": from_category_id,
            "toCategoryId": to_category_id,
            "todoId": todo_id,
            "destIndex": dest_index,
            "sourceOrder": source_order,
            "destOrder": dest_order,
            "fields": fields or {},
        }
        await self._request("POST", "/transactions/move-todo", json=payload)

    # --- Private Methods ---

    @staticmethod
    def _created_id(data: Any) -> str:
        if not isinstance(data, dict) or not data.get("id"):
            raise PersistenceError(f"Store did not return an id: {data!r}")
        return str(data["id"])

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response body.

        Returns:
            Decoded JSON, or None for empty responses

        Raises:
            NotFoundError: HTTP 404
            TransactionConflictError: HTTP 409 (transaction aborted)
            PersistenceError: Transport failures, timeouts and other HTTP errors
        """
        logger.debug("%s %s: body=%s", method, path, json)

        start_time = time.monotonic()
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s %s timed out after %.0fms", method, path, elapsed_ms)
            raise PersistenceError(f"Request timed out: {method} {path}") from e
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s %s failed after %.0fms: %s", method, path, elapsed_ms, e)
            raise PersistenceError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if response.status_code == 404:
            logger.error("%s %s: 404 Not Found (%.0fms)", method, path, elapsed_ms)
            raise NotFoundError(f"Not found: {path}")
        if response.status_code == 409:
            logger.error("%s %s: 409 Conflict (%.0fms)", method, path, elapsed_ms)
            raise TransactionConflictError(f"Transaction aborted: {response.text}")
        if response.status_code >= 400:
            logger.error(
                "%s %s: HTTP %d (%.0fms)", method, path, response.status_code, elapsed_ms
            )
            raise PersistenceError(f"HTTP {response.status_code}: {response.text}")

        logger.info("%s %s: %d (%.0fms)", method, path, response.status_code, elapsed_ms)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s: Invalid JSON response (%.0fms)", method, path, elapsed_ms)
            raise PersistenceError(f"Invalid JSON response: {e}") from e
