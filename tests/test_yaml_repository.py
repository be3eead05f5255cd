"""Tests for YamlFileRepository."""

import asyncio
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from todoboard.errors import PersistenceError
from todoboard.models import TodoDraft
from todoboard.repositories import YamlFileRepository


@pytest.fixture
def board_file(tmp_path: Path) -> Path:
    return tmp_path / "board.yaml"


class TestYamlFileRepository:
    """Tests for the file-backed repository."""

    def test_missing_file_is_empty_board(self, board_file: Path):
        repo = YamlFileRepository(board_file)

        assert asyncio.run(repo.list_categories()) == []
        assert not board_file.exists()

    def test_writes_after_each_change(self, board_file: Path):
        repo = YamlFileRepository(board_file)

        category_id = asyncio.run(repo.create_category("Todo"))

        data = yaml.safe_load(board_file.read_text())
        assert data["version"] == 1
        assert data["categories"] == [
            {"id": category_id, "title": "Todo", "position": 0, "todos": []}
        ]

    def test_documents_use_camel_case(self, board_file: Path):
        repo = YamlFileRepository(board_file)
        category_id = asyncio.run(repo.create_category("Todo"))
        draft = TodoDraft(
            content="Ship",
            category_id=category_id,
            due_date=date(2024, 1, 31),
            tags=["release"],
        )

        asyncio.run(repo.create_todo(category_id, draft))

        todo = yaml.safe_load(board_file.read_text())["categories"][0]["todos"][0]
        assert todo["isCompleted"] is False
        assert todo["dueDate"] == "2024-01-31"
        assert todo["categoryId"] == category_id
        assert "description" not in todo

    def test_round_trip_through_new_instance(self, board_file: Path):
        repo = YamlFileRepository(board_file)
        category_id = asyncio.run(repo.create_category("Todo"))
        todo_id = asyncio.run(
            repo.create_todo(category_id, TodoDraft(content="Ship", category_id=category_id))
        )

        reopened = YamlFileRepository(board_file)

        [category] = asyncio.run(reopened.list_categories())
        [todo] = asyncio.run(reopened.list_todos(category_id))
        assert category.title == "Todo"
        assert todo.id == todo_id
        assert todo.content == "Ship"

    def test_reload_picks_up_external_edits(self, board_file: Path):
        repo = YamlFileRepository(board_file)
        asyncio.run(repo.create_category("Todo"))
        board_file.write_text("version: 1\ncategories:\n  - id: x\n    title: Other\n")

        repo.reload()

        assert [c.id for c in asyncio.run(repo.list_categories())] == ["x"]

    def test_write_failure_keeps_previous_state(self, board_file: Path):
        """If the file cannot be replaced, neither the file nor memory change."""
        repo = YamlFileRepository(board_file)
        asyncio.run(repo.create_category("Todo"))
        before = board_file.read_text()

        with (
            patch("todoboard.repositories.yaml_file.os.replace", side_effect=OSError("disk full")),
            pytest.raises(PersistenceError, match="disk full"),
        ):
            asyncio.run(repo.create_category("Done"))

        assert board_file.read_text() == before
        assert [c.title for c in asyncio.run(repo.list_categories())] == ["Todo"]
        assert [p.name for p in board_file.parent.iterdir()] == ["board.yaml"]

    def test_invalid_yaml(self, board_file: Path):
        board_file.write_text("categories: [unclosed\n")

        with pytest.raises(PersistenceError, match="Cannot read board file"):
            YamlFileRepository(board_file)

    def test_invalid_document(self, board_file: Path):
        board_file.write_text("categories:\n  - title: No id\n")

        with pytest.raises(PersistenceError):
            YamlFileRepository(board_file)

    def test_top_level_not_a_mapping(self, board_file: Path):
        board_file.write_text("- id: backlog\n  title: Backlog\n")

        with pytest.raises(PersistenceError, match="expected a mapping"):
            YamlFileRepository(board_file)
