"""Field index over the session's JSON document."""

from __future__ import annotations

import json
import logging

from jqv._suggestion import Suggestion, SuggestionType

logger = logging.getLogger(__name__)


class IndexParseError(ValueError):
    """Raised when the document handed to :class:`JsonIndex` is not JSON."""


class JsonIndex:
    """Parsed document tree plus the flat set of every field name in it.

    The tree is read-only for the life of the session.  Arrays are sampled
    through their first element only, so documents are assumed to hold
    homogeneous records inside each array.
    """

    def __init__(self) -> None:
        self.root: object = None
        self.loaded: bool = False
        self.field_names: set[str] = set()

    def analyze(self, text: str) -> None:
        """Parse *text* and replace the index.

        On failure :class:`IndexParseError` is raised and the previous tree
        and field names are kept as they were.
        """
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("document is not valid JSON: %s (line %d)", e.msg, e.lineno)
            raise IndexParseError(f"JSON error: {e.msg} (line {e.lineno})") from e
        except RecursionError as e:
            logger.warning("document is nested too deeply to index")
            raise IndexParseError("JSON error: document is nested too deeply") from e
        names: set[str] = set()
        _collect_fields(value, names)
        self.root = value
        self.loaded = True
        self.field_names = names
        logger.debug("indexed %d distinct field names", len(names))

    def resolve(self, path: str) -> tuple[bool, object]:
        """Navigate a dot path such as ``.services[].items`` from the root.

        Returns ``(found, node)``.  ``found`` is False when a segment is
        missing, a non-object is indexed by name, or an array step lands on
        an empty array or a non-array.
        """
        if not self.loaded:
            return False, None
        current = self.root
        for segment in path.removeprefix(".").split("."):
            if not segment:
                continue
            bracket = segment.find("[")
            name = segment[:bracket] if bracket != -1 else segment
            if not isinstance(current, dict) or name not in current:
                return False, None
            current = current[name]
            if bracket != -1:
                if not isinstance(current, list) or not current:
                    return False, None
                current = current[0]
        return True, current

    def fields_at(self, node: object, prefix: str = "") -> list[Suggestion]:
        """Return ``.key`` suggestions for the keys of *node* matching *prefix*."""
        while isinstance(node, list):
            if not node:
                return []
            node = node[0]
        if not isinstance(node, dict):
            return []
        needle = prefix.lower()
        found = [
            Suggestion(f".{key}", SuggestionType.FIELD)
            for key in node
            if key.lower().startswith(needle)
        ]
        found.sort(key=lambda s: s.text)
        return found

    def suggest_fields(self, path: str, prefix: str) -> list[Suggestion]:
        """Field suggestions at *path* (root when empty or ``.``)."""
        if not self.loaded:
            return []
        if path in ("", "."):
            return self.fields_at(self.root, prefix)
        found, node = self.resolve(path)
        if not found:
            return []
        return self.fields_at(node, prefix)


def _collect_fields(value: object, names: set[str]) -> None:
    """문서 전체를 스택으로 순회하며 모든 깊이의 키를 수집."""
    stack = [value]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            names.update(node)
            stack.extend(node.values())
        elif isinstance(node, list):
            stack.extend(node)
