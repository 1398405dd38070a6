"""Suggestion list state for the query line."""

from __future__ import annotations

from jqv._context import SuggestionContext, get_suggestions
from jqv._json_index import JsonIndex
from jqv._suggestion import Suggestion, SuggestionType

__all__ = [
    "AutocompleteEngine",
    "Suggestion",
    "SuggestionContext",
    "SuggestionType",
]


class AutocompleteEngine:
    """Owns the visible suggestions and the highlighted entry.

    A read model over the buffer: it never edits text itself.  ``visible``
    is true exactly when the list is non-empty.
    """

    def __init__(self) -> None:
        self.suggestions: list[Suggestion] = []
        self.selected_index: int | None = None

    @property
    def visible(self) -> bool:
        return bool(self.suggestions)

    def is_visible(self) -> bool:
        return self.visible

    def refresh(self, query: str, cursor: int, index: JsonIndex) -> None:
        self.suggestions = get_suggestions(query, cursor, index)
        self.selected_index = 0 if self.suggestions else None

    def selected(self) -> Suggestion | None:
        if self.selected_index is None:
            return None
        return self.suggestions[self.selected_index]

    def select_next(self) -> None:
        if not self.suggestions:
            return
        self.selected_index = ((self.selected_index or 0) + 1) % len(self.suggestions)

    def select_previous(self) -> None:
        if not self.suggestions:
            return
        self.selected_index = ((self.selected_index or 0) - 1) % len(self.suggestions)

    def hide(self) -> None:
        self.suggestions = []
        self.selected_index = None
