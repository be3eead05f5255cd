"""CLI entry point for todoboard."""

import argparse
import asyncio
from datetime import date
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def _add_todo_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--description", default=None, help="Longer description")
    parser.add_argument(
        "--due", type=date.fromisoformat, default=None, metavar="YYYY-MM-DD", help="Due date"
    )
    parser.add_argument(
        "--tag", action="append", default=None, help="Tag (repeat for several tags)"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per board operation."""
    parser = argparse.ArgumentParser(
        prog="todoboard",
        description="Kanban board of categories and todos",
    )
    parser.add_argument(
        "--backend",
        choices=["memory", "yaml", "http"],
        default=None,
        help="Storage backend (default: yaml)",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Board file for the yaml backend (default: board.yaml)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Document API base URL for the http backend",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Print the board")
    show.add_argument("--search", default=None, help="Only categories with matching todos")
    show.add_argument(
        "--matching-only", action="store_true", help="With --search, hide non-matching todos"
    )

    add_category = commands.add_parser("add-category", help="Append a category")
    add_category.add_argument("title")

    rename_category = commands.add_parser("rename-category", help="Rename a category")
    rename_category.add_argument("category_id")
    rename_category.add_argument("title")

    delete_category = commands.add_parser(
        "delete-category", help="Delete a category and its todos"
    )
    delete_category.add_argument("category_id")

    move_category = commands.add_parser("move-category", help="Move a category to a position")
    move_category.add_argument("category_id")
    move_category.add_argument("index", type=int)

    add = commands.add_parser("add", help="Add a todo at the top of a category")
    add.add_argument("category_id")
    add.add_argument("content")
    _add_todo_fields(add)

    edit = commands.add_parser("edit", help="Update a todo")
    edit.add_argument("category_id")
    edit.add_argument("todo_id")
    edit.add_argument("--content", default=None, help="New content")
    edit.add_argument("--to", default=None, metavar="CATEGORY_ID", help="Move to category")
    _add_todo_fields(edit)

    toggle = commands.add_parser("toggle", help="Toggle a todo's completed flag")
    toggle.add_argument("category_id")
    toggle.add_argument("todo_id")

    delete = commands.add_parser("delete", help="Delete a todo")
    delete.add_argument("category_id")
    delete.add_argument("todo_id")

    move = commands.add_parser("move", help="Move a todo (drag and drop)")
    move.add_argument("source_id")
    move.add_argument("dest_id")
    move.add_argument("todo_id")
    move.add_argument("index", type=int)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Build settings from CLI args; unset flags fall back to TODOBOARD_* env vars
    settings_kwargs: dict = {}
    if args.backend:
        settings_kwargs["backend"] = args.backend
    if args.data_file:
        settings_kwargs["data_file"] = args.data_file
    if args.api_url:
        settings_kwargs["api_url"] = args.api_url
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)
    setup_logging(settings.verbose, settings.log_file)

    # Import here so --help and --version stay fast
    from .cli import output
    from .cli.commands import run_command
    from .errors import BoardError
    from .repositories import create_repository

    try:
        repository = create_repository(settings)
    except (BoardError, ValueError) as e:
        output.error(str(e))
        raise SystemExit(1) from e
    raise SystemExit(asyncio.run(run_command(args, repository)))


if __name__ == "__main__":
    main()
