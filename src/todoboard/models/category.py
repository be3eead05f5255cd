"""Category domain model."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .todo import Todo


class Category(BaseModel):
    """An ordered column of todos.

    ``todos`` is kept in ascending ``position`` order; the remote store keeps
    categories and their todos as separate documents, so categories read from
    a repository arrive with an empty ``todos`` list.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    title: str
    position: int = Field(default=0, ge=0)
    todos: list[Todo] = Field(default_factory=list)

    @property
    def todo_count(self) -> int:
        return len(self.todos)

    def find_todo(self, todo_id: str) -> Todo | None:
        """Get a todo in this category by id."""
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        return None
