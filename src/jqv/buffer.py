"""Single-line text buffer behind the query field."""

from __future__ import annotations

from enum import Enum, auto

UNDO_LIMIT = 200


class CursorMove(Enum):
    BACK = auto()
    FORWARD = auto()
    HEAD = auto()
    END = auto()
    WORD_FORWARD = auto()
    WORD_BACK = auto()
    WORD_END = auto()


def _is_word(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class QueryBuffer:
    """One editable line with a cursor, a char-wise selection and undo.

    Mutators return True when the text actually changed.  The cursor may
    sit one past the last character (append position) in every mode.
    """

    def __init__(self, text: str = "") -> None:
        self.lines: list[str] = [text]
        self.cursor_row: int = 0
        self.cursor_col: int = len(text)
        self.selection_anchor: int | None = None
        self.yank_text: str = ""
        self.undo_stack: list[tuple[list[str], int, int]] = []
        self.redo_stack: list[tuple[list[str], int, int]] = []

    # -- Helpers -----------------------------------------------------------

    @property
    def text(self) -> str:
        return self.lines[0]

    def _set_text(self, text: str, col: int) -> None:
        """줄 내용을 교체하고 커서를 줄 범위 안으로 맞춤."""
        self.lines[0] = text
        self.cursor_col = max(0, min(col, len(text)))

    def _save_undo(self) -> None:
        self.undo_stack.append((self.lines[:], self.cursor_row, self.cursor_col))
        if len(self.undo_stack) > UNDO_LIMIT:
            self.undo_stack.pop(0)
        # Clear redo stack on new edit
        if self.redo_stack:
            self.redo_stack.clear()

    def _word_forward(self, col: int) -> int:
        line = self.text
        while col < len(line) and _is_word(line[col]):
            col += 1
        while col < len(line) and not _is_word(line[col]):
            col += 1
        return col

    def _word_back(self, col: int) -> int:
        line = self.text
        if col == 0:
            return 0
        col -= 1
        while col > 0 and not _is_word(line[col]):
            col -= 1
        while col > 0 and _is_word(line[col - 1]):
            col -= 1
        return col

    def _word_end(self, col: int) -> int:
        """다음 단어의 마지막 글자 위치. 줄 끝을 넘지 않음."""
        line = self.text
        col += 1
        while col < len(line) and not _is_word(line[col]):
            col += 1
        while col + 1 < len(line) and _is_word(line[col + 1]):
            col += 1
        return min(col, len(line))

    # -- Queries -----------------------------------------------------------

    def cursor(self) -> tuple[int, int]:
        return self.cursor_row, self.cursor_col

    def selection_range(self) -> tuple[int, int] | None:
        if self.selection_anchor is None:
            return None
        a, c = self.selection_anchor, self.cursor_col
        return (a, c) if a <= c else (c, a)

    # -- Cursor ------------------------------------------------------------

    def move_cursor(self, move: CursorMove) -> None:
        col = self.cursor_col
        if move is CursorMove.BACK:
            col -= 1
        elif move is CursorMove.FORWARD:
            col += 1
        elif move is CursorMove.HEAD:
            col = 0
        elif move is CursorMove.END:
            col = len(self.text)
        elif move is CursorMove.WORD_FORWARD:
            col = self._word_forward(col)
        elif move is CursorMove.WORD_BACK:
            col = self._word_back(col)
        elif move is CursorMove.WORD_END:
            col = self._word_end(col)
        self.cursor_col = max(0, min(col, len(self.text)))

    def start_selection(self) -> None:
        self.selection_anchor = self.cursor_col

    def cancel_selection(self) -> None:
        self.selection_anchor = None

    # -- Edits -------------------------------------------------------------

    def insert_str(self, text: str) -> bool:
        if not text:
            return False
        self._save_undo()
        line, col = self.text, self.cursor_col
        self._set_text(line[:col] + text + line[col:], col + len(text))
        return True

    def delete_next_char(self) -> bool:
        line, col = self.text, self.cursor_col
        if col >= len(line):
            return False
        self._save_undo()
        self._set_text(line[:col] + line[col + 1 :], col)
        return True

    def delete_char(self) -> bool:
        line, col = self.text, self.cursor_col
        if col == 0:
            return False
        self._save_undo()
        self._set_text(line[: col - 1] + line[col:], col - 1)
        return True

    def delete_line_by_end(self) -> bool:
        line, col = self.text, self.cursor_col
        if col >= len(line):
            return False
        self._save_undo()
        self.yank_text = line[col:]
        self._set_text(line[:col], col)
        return True

    def delete_line_by_head(self) -> bool:
        line, col = self.text, self.cursor_col
        if col == 0:
            return False
        self._save_undo()
        self.yank_text = line[:col]
        self._set_text(line[col:], 0)
        return True

    def delete_word_before(self) -> bool:
        col = self.cursor_col
        start = self._word_back(col)
        if start == col:
            return False
        self._save_undo()
        line = self.text
        self.yank_text = line[start:col]
        self._set_text(line[:start] + line[col:], start)
        return True

    def cut(self) -> bool:
        """Remove the selected range; the selection ends either way."""
        rng = self.selection_range()
        self.selection_anchor = None
        if rng is None or rng[0] == rng[1]:
            return False
        start, end = rng
        self._save_undo()
        line = self.text
        self.yank_text = line[start:end]
        self._set_text(line[:start] + line[end:], start)
        return True

    def set_text(self, text: str) -> bool:
        """Replace the whole line, leaving the cursor at its end."""
        if text == self.text:
            return False
        self._save_undo()
        self.selection_anchor = None
        self._set_text(text, len(text))
        return True

    def undo(self) -> bool:
        if not self.undo_stack:
            return False
        # Save current state for redo
        self.redo_stack.append((self.lines[:], self.cursor_row, self.cursor_col))
        self.lines, self.cursor_row, self.cursor_col = self.undo_stack.pop()
        self.selection_anchor = None
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        # Save current state for undo
        self.undo_stack.append((self.lines[:], self.cursor_row, self.cursor_col))
        self.lines, self.cursor_row, self.cursor_col = self.redo_stack.pop()
        self.selection_anchor = None
        return True

    # -- Raw key input -----------------------------------------------------

    def input(self, event) -> bool:
        """Apply an insert-mode key event; return True if the text changed."""
        key = event.key
        char = event.character

        if key == "backspace":
            return self.delete_char()
        if key == "delete":
            return self.delete_next_char()
        if key == "ctrl+w":
            return self.delete_word_before()
        if key == "ctrl+k":
            return self.delete_line_by_end()

        if key in ("left", "right", "home", "end"):
            moves = {
                "left": CursorMove.BACK,
                "right": CursorMove.FORWARD,
                "home": CursorMove.HEAD,
                "end": CursorMove.END,
            }
            self.move_cursor(moves[key])
            return False

        if key == "tab":
            return False

        if char and char.isprintable():
            return self.insert_str(char)
        return False
