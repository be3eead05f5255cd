"""Service for filtering the board by a search term."""

from collections.abc import Sequence

from ..models import Category, Todo


class FilterService:
    """Derived, read-only views of the board for a search term."""

    def apply(
        self,
        categories: Sequence[Category],
        term: str,
        *,
        matching_only: bool = False,
    ) -> list[Category]:
        """
        Keep categories holding at least one todo that matches ``term``.

        Matching is a case-insensitive substring test against content,
        description and every tag. A kept category keeps all of its todos
        unless ``matching_only`` is set, which narrows it to the matches.
        A blank term returns every category unchanged.
        """
        needle = term.strip().lower()
        if not needle:
            return list(categories)

        result: list[Category] = []
        for category in categories:
            matches = [todo for todo in category.todos if self._matches(todo, needle)]
            if not matches:
                continue
            if matching_only:
                category = category.model_copy(update={"todos": matches})
            result.append(category)
        return result

    def _matches(self, todo: Todo, needle: str) -> bool:
        """Check if a todo matches a lowercased search term."""
        if needle in todo.content.lower():
            return True
        if todo.description and needle in todo.description.lower():
            return True
        return any(needle in tag.lower() for tag in todo.tags)
