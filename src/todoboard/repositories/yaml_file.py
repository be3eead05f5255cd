"""YAML-file repository: the in-memory store persisted to a single file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import yaml

from ..errors import PersistenceError
from ..models import Category
from .memory import Documents, InMemoryRepository

logger = logging.getLogger(__name__)


class YamlFileRepository(InMemoryRepository):
    """
    Repository backed by one YAML file.

    The file is loaded on construction (and on ``reload``) and rewritten in
    full after every successful transaction. Writes go to a temporary file
    that is renamed over the target, so a crash never leaves a partial file.
    """

    FILE_VERSION = 1

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(self._load())

    def reload(self) -> None:
        """Re-read the file, discarding the cached documents."""
        self._docs = self._to_documents(self._load())

    # --- Private Methods ---

    def _load(self) -> list[Category]:
        if not self.path.exists():
            return []
        try:
            with self.path.open() as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"expected a mapping at the top level, got {type(data).__name__}")
            categories = [Category.model_validate(item) for item in data.get("categories", [])]
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error("Cannot read board file %s: %s", self.path, e)
            raise PersistenceError(f"Cannot read board file {self.path}: {e}") from e

        logger.debug("Loaded %d categories from %s", len(categories), self.path)
        return categories

    def _commit(self, docs: Documents) -> None:
        previous = self._docs
        self._docs = docs
        try:
            self._write()
        except OSError as e:
            self._docs = previous
            logger.error("Cannot write board file %s: %s", self.path, e)
            raise PersistenceError(f"Cannot write board file {self.path}: {e}") from e

    def _write(self) -> None:
        data = {
            "version": self.FILE_VERSION,
            "categories": [
                category.model_dump(mode="json", by_alias=True, exclude_none=True)
                for category in self.to_categories()
            ],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w") as f:
                f.write("# Auto-generated - do not edit while the board is open\n")
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
