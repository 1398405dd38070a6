"""Suggestion value shared by the index, the builtin catalog and the popup."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SuggestionType(Enum):
    FIELD = auto()
    FUNCTION = auto()
    OPERATOR = auto()
    PATTERN = auto()


@dataclass(frozen=True, eq=False)
class Suggestion:
    text: str
    kind: SuggestionType
    description: str | None = None

    # identity is the inserted text; kind and description are display only
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Suggestion):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)
