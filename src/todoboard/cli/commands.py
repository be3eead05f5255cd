"""Board commands run from the CLI."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Awaitable, Callable

from ..errors import BoardError, ValidationError
from ..models import TodoUpdate
from ..repositories import RepositoryProtocol
from ..services import BoardService, MutationRunner, TodoService
from . import output

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, BoardService, TodoService], Awaitable[None]]


async def _show(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    pass


async def _add_category(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    await board.add_category(args.title)


async def _rename_category(
    args: argparse.Namespace, board: BoardService, todos: TodoService
) -> None:
    await board.update_category(args.category_id, args.title)


async def _delete_category(
    args: argparse.Namespace, board: BoardService, todos: TodoService
) -> None:
    await board.delete_category(args.category_id)


async def _move_category(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    await board.move_category(args.category_id, args.index)


async def _add(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    await todos.add_todo(
        args.category_id,
        args.content,
        description=args.description,
        due_date=args.due,
        tags=args.tag,
    )


async def _edit(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    fields = {
        "content": args.content,
        "description": args.description,
        "due_date": args.due,
        "tags": args.tag,
        "category_id": args.to,
    }
    # Only flags that were given become part of the update
    updates = TodoUpdate(**{name: value for name, value in fields.items() if value is not None})
    await todos.update_todo(args.todo_id, args.category_id, updates)


async def _toggle(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    await todos.toggle_todo(args.category_id, args.todo_id)


async def _delete(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    await todos.delete_todo(args.category_id, args.todo_id)


async def _move(args: argparse.Namespace, board: BoardService, todos: TodoService) -> None:
    await todos.move_todo(args.source_id, args.dest_id, args.todo_id, args.index)


HANDLERS: dict[str, Handler] = {
    "show": _show,
    "add-category": _add_category,
    "rename-category": _rename_category,
    "delete-category": _delete_category,
    "move-category": _move_category,
    "add": _add,
    "edit": _edit,
    "toggle": _toggle,
    "delete": _delete,
    "move": _move,
}


async def run_command(args: argparse.Namespace, repository: RepositoryProtocol) -> int:
    """Load the board, run one command and print the result.

    Returns:
        Process exit code (0 on success, 1 when the operation failed)
    """
    runner = MutationRunner(notifier=output.notice)
    board = BoardService(repository, runner)
    todos = TodoService(repository, runner)

    try:
        await board.refresh()
        await HANDLERS[args.command](args, board, todos)
    except ValidationError as e:
        # Rejected before the runner saw it, so nothing was reported yet
        output.error(str(e))
        return 1
    except BoardError as e:
        logger.debug("Command %s failed: %s", args.command, e)
        return 1
    finally:
        await repository.close()

    search = getattr(args, "search", None)
    if search:
        output.board(board.search(search, matching_only=args.matching_only))
    else:
        output.board(board.categories)
    return 0
