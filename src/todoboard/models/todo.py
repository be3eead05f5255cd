"""Todo domain models."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _unique_tags(tags: list[str] | None) -> list[str] | None:
    """Drop duplicate tags, keeping first occurrence order."""
    if tags is None:
        return None
    return list(dict.fromkeys(tags))


class TodoDraft(BaseModel):
    """A todo that has not been assigned an id yet.

    Document field names are camelCase (``isCompleted``, ``dueDate``,
    ``categoryId``); snake_case names are accepted as well.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    content: str
    is_completed: bool = False
    description: str | None = None
    due_date: date | None = None
    tags: list[str] = Field(default_factory=list)  # set-like, order irrelevant
    category_id: str
    position: int = Field(default=0, ge=0)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        """Tags are a set; duplicates carry no meaning."""
        return _unique_tags(v) or []

    def to_document(self) -> dict[str, Any]:
        """Dump to a JSON-compatible document without the id."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

    def with_id(self, todo_id: str) -> Todo:
        """Create a Todo carrying this draft's fields."""
        return Todo(id=todo_id, **self.model_dump())


class Todo(TodoDraft):
    """A single task item belonging to exactly one category."""

    id: str

    def to_draft(self) -> TodoDraft:
        """Strip the id."""
        return TodoDraft(**self.model_dump(exclude={"id"}))


class TodoUpdate(BaseModel):
    """Partial update for a todo.

    Only fields that were explicitly set are applied, so passing
    ``description=None`` clears the description while omitting it keeps it.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    content: str | None = None
    description: str | None = None
    due_date: date | None = None
    tags: list[str] | None = None
    is_completed: bool | None = None
    category_id: str | None = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str] | None) -> list[str] | None:
        return _unique_tags(v)

    def changes(self) -> dict[str, Any]:
        """Explicitly set fields, keyed by model field name."""
        return self.model_dump(exclude_unset=True)

    def to_document(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """Explicitly set fields as a camelCase, JSON-compatible document."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude=exclude)
