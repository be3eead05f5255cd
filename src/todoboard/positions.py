"""Position reconciliation for ordered category and todo lists.

Every function here is pure: inputs are never modified and the returned lists
hold copies wherever a position (or parent category) changed. After any of the
list-producing functions, the ``position`` of each element equals its index,
so positions are always a dense ``0..len-1`` ranking.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from .errors import NotFoundError
from .models import Category, Todo

Positioned = TypeVar("Positioned", Todo, Category)


def reindex(items: Sequence[Positioned]) -> list[Positioned]:
    """Return a copy with each element's position set to its index."""
    return [
        item if item.position == index else item.model_copy(update={"position": index})
        for index, item in enumerate(items)
    ]


def _clamp(index: int, upper: int) -> int:
    return max(0, min(index, upper))


def insert_at(items: Sequence[Positioned], item: Positioned, index: int) -> list[Positioned]:
    """Insert ``item`` at ``index`` (clamped to ``[0, len]``) and reindex."""
    result = list(items)
    result.insert(_clamp(index, len(result)), item)
    return reindex(result)


def index_of(items: Sequence[Positioned], item_id: str) -> int:
    """Index of the element with ``item_id``.

    Raises:
        NotFoundError: No element has that id.
    """
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise NotFoundError(f"No item with id {item_id!r}")


def remove_by_id(
    items: Sequence[Positioned], item_id: str, *, missing_ok: bool = False
) -> list[Positioned]:
    """Remove the element with ``item_id`` and reindex the rest.

    Raises:
        NotFoundError: The id is absent and ``missing_ok`` is false. With
            ``missing_ok`` a missing id just reindexes the list.
    """
    remaining = [item for item in items if item.id != item_id]
    if len(remaining) == len(items) and not missing_ok:
        raise NotFoundError(f"No item with id {item_id!r}")
    return reindex(remaining)


def move_within_list(
    items: Sequence[Positioned], from_index: int, to_index: int
) -> list[Positioned]:
    """Move the element at ``from_index`` to ``to_index``.

    ``to_index`` is read against the list with the element already removed
    (drag-and-drop semantics) and is clamped to the valid range.

    Raises:
        IndexError: ``from_index`` does not identify an element.
    """
    if not 0 <= from_index < len(items):
        raise IndexError(f"from_index {from_index} out of range for {len(items)} items")
    result = list(items)
    moved = result.pop(from_index)
    result.insert(_clamp(to_index, len(result)), moved)
    return reindex(result)


def move_across_lists(
    source: Sequence[Todo],
    dest: Sequence[Todo],
    todo_id: str,
    dest_index: int,
    dest_category_id: str,
) -> tuple[list[Todo], list[Todo]]:
    """Move a todo from ``source`` into ``dest`` at ``dest_index``.

    The moved todo is re-parented to ``dest_category_id``; ``dest_index`` is
    clamped so an out-of-range target appends. Both lists are reindexed
    independently.

    Raises:
        NotFoundError: ``todo_id`` is not in ``source``.
    """
    moved = source[index_of(source, todo_id)]
    new_source = remove_by_id(source, todo_id)
    new_dest = insert_at(
        [todo for todo in dest if todo.id != todo_id],
        moved.model_copy(update={"category_id": dest_category_id}),
        dest_index,
    )
    return new_source, new_dest


def ordered_ids(items: Sequence[Positioned]) -> list[str]:
    """Ids in list order."""
    return [item.id for item in items]


def sort_by_position(items: Sequence[Positioned]) -> list[Positioned]:
    """Sort ascending by position; ties keep their incoming order."""
    return sorted(items, key=lambda item: item.position)


def is_dense(items: Sequence[Positioned]) -> bool:
    """True when positions are exactly ``0..len-1`` in list order."""
    return all(item.position == index for index, item in enumerate(items))
