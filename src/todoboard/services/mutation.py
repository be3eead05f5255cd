"""Two-phase optimistic mutation protocol."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Iterable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Literal

from ..errors import ValidationError
from ..models import Category, Todo
from ..positions import Positioned
from ..store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """A user-visible message about the outcome of an operation."""

    level: Literal["success", "error"]
    message: str

    @classmethod
    def success(cls, message: str) -> Notice:
        return cls("success", message)

    @classmethod
    def error(cls, message: str) -> Notice:
        return cls("error", message)


Notifier = Callable[[Notice], None]


def _log_notice(notice: Notice) -> None:
    if notice.level == "error":
        logger.warning("Notice: %s", notice.message)
    else:
        logger.info("Notice: %s", notice.message)


class Mutation:
    """Handle an operation uses inside ``MutationRunner.operation``."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store
        self.applied = False
        self.quiet = False

    @property
    def state(self) -> tuple[Category, ...]:
        """The store's current categories (never a stale copy)."""
        return self._store.categories

    def apply(self, new_state: Iterable[Category]) -> None:
        """Optimistically replace the store's state."""
        self._store.replace(new_state)
        self.applied = True


class MutationRunner:
    """
    Runs board operations under the optimistic-update protocol.

    Inside ``operation()`` an operation reads the current state, applies its
    new state locally (visible immediately), then awaits the repository. If
    anything raises, the store is restored to the snapshot taken on entry and
    an error notice is emitted before the exception propagates.

    Operations are serialized by a single lock, so each one reads the state
    left by the previous one and a rollback never discards another
    operation's changes.
    """

    def __init__(self, store: EntityStore | None = None, notifier: Notifier | None = None) -> None:
        self.store = store if store is not None else EntityStore()
        self._notifier = notifier or _log_notice
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """True while an operation is in flight."""
        return self._lock.locked()

    def notify(self, notice: Notice) -> None:
        self._notifier(notice)

    @asynccontextmanager
    async def operation(self, action: str, success: str | None = None) -> AsyncIterator[Mutation]:
        """Run one operation with snapshot and rollback.

        Args:
            action: What is being done, for logs and the failure notice
                (e.g. "update todo")
            success: Notice shown when the operation completes, if any
        """
        async with self._lock:
            snapshot = self.store.snapshot()
            mutation = Mutation(self.store)
            try:
                yield mutation
            except asyncio.CancelledError:
                self._rollback(snapshot, mutation, action)
                raise
            except Exception as e:
                self._rollback(snapshot, mutation, action)
                logger.warning("Failed to %s: %s", action, e)
                self.notify(Notice.error(f"Failed to {action}: {e}"))
                raise

        if mutation.quiet:
            logger.debug("No change: %s", action)
            return
        logger.info("Completed: %s", action)
        if success:
            self.notify(Notice.success(success))

    def _rollback(self, snapshot: tuple[Category, ...], mutation: Mutation, action: str) -> None:
        if not mutation.applied:
            return
        self.store.replace(snapshot)
        logger.warning("Rolled back local changes: %s", action)


# --- State helpers shared by the services ---


def require_text(value: str, what: str) -> str:
    """Trim ``value`` and reject it when empty."""
    text = value.strip() if value else ""
    if not text:
        raise ValidationError(f"{what} cannot be empty")
    return text


def replace_category(state: Sequence[Category], category: Category) -> list[Category]:
    """Swap in ``category`` for the entry with the same id."""
    return [category if current.id == category.id else current for current in state]


def replace_todos(state: Sequence[Category], category_id: str, todos: list[Todo]) -> list[Category]:
    """Give the category ``category_id`` a new todo list."""
    return [
        current.model_copy(update={"todos": todos}) if current.id == category_id else current
        for current in state
    ]


def swap_id(items: Sequence[Positioned], old_id: str, new_id: str) -> list[Positioned]:
    """Replace a provisional id with the durable one."""
    return [
        item.model_copy(update={"id": new_id}) if item.id == old_id else item for item in items
    ]
