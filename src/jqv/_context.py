"""Cursor context inference for query autocomplete."""

from __future__ import annotations

from enum import Enum, auto

from jqv._builtins import filter_builtins
from jqv._json_index import JsonIndex
from jqv._suggestion import Suggestion

_DELIMITERS = frozenset("|;()[]{}, \t\n\r")
_PATH_RESETS = ("|", "(", ";")


class SuggestionContext(Enum):
    FUNCTION = auto()  # start of a term, after a pipe or an operator
    FIELD = auto()  # after a field-access dot


def classify(text: str, cursor: int) -> tuple[SuggestionContext, str]:
    """Return the context at *cursor* and the partial token before it.

    >>> classify(".user.na", 8)
    (<SuggestionContext.FIELD: 2>, 'na')
    >>> classify(".name | ma", 10)
    (<SuggestionContext.FUNCTION: 1>, 'ma')
    """
    before = text[: max(0, cursor)]
    end = len(before.rstrip())
    if end == 0:
        return SuggestionContext.FUNCTION, ""
    if before[end - 1] == ".":
        return SuggestionContext.FIELD, ""

    start = end
    while start > 0 and before[start - 1] not in _DELIMITERS:
        start -= 1
    partial = before[start:end]

    if partial.startswith("."):
        return SuggestionContext.FIELD, partial[partial.rfind(".") + 1 :]

    # a token that follows a dot across whitespace, e.g. ". na"; plain
    # tokenization normally catches the dot above
    j = len(before[:start].rstrip())
    if j > 0 and before[j - 1] == ".":
        return SuggestionContext.FIELD, partial
    return SuggestionContext.FUNCTION, partial


def clean_path(text: str) -> str:
    """Reduce *text* to the trailing dot path after the last pipe/paren/semicolon.

    Anything that does not look like a dot path comes back empty.
    """
    cut = max(text.rfind(ch) for ch in _PATH_RESETS) + 1
    path = text[cut:].strip()
    if path and not path.startswith("."):
        return ""
    return path


def path_before_field(before: str) -> str:
    """Path leading up to the field being typed.

    ``.products.ty`` -> ``.products``; ``.services[].service`` ->
    ``.services[]``; ``.na`` and ``.`` -> ``""`` (root).
    """
    last_dot = before.rfind(".")
    if last_dot <= 0:
        return ""
    return clean_path(before[:last_dot])


def get_suggestions(query: str, cursor: int, index: JsonIndex) -> list[Suggestion]:
    context, partial = classify(query, cursor)
    if context is SuggestionContext.FIELD:
        path = path_before_field(query[: max(0, cursor)])
        return index.suggest_fields(path, partial)
    if not partial:
        return []
    return filter_builtins(partial)
