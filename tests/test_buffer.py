"""Tests for the single-line query buffer."""

from types import SimpleNamespace

from jqv.buffer import UNDO_LIMIT, CursorMove, QueryBuffer


def key(name: str, character: str | None = None):
    if character is None and len(name) == 1:
        character = name
    return SimpleNamespace(key=name, character=character)


def _at(text: str, col: int) -> QueryBuffer:
    buf = QueryBuffer(text)
    buf.cursor_col = col
    return buf


class TestBufferBasic:
    def test_init_empty(self):
        buf = QueryBuffer()
        assert buf.lines == [""]
        assert buf.cursor() == (0, 0)

    def test_init_with_text_puts_cursor_at_end(self):
        buf = QueryBuffer(".name")
        assert buf.text == ".name"
        assert buf.cursor() == (0, 5)

    def test_insert_str(self):
        buf = _at(".ne", 2)
        assert buf.insert_str("am") is True
        assert buf.text == ".name"
        assert buf.cursor_col == 4

    def test_insert_empty_is_no_change(self):
        buf = QueryBuffer("x")
        assert buf.insert_str("") is False
        assert buf.undo_stack == []


class TestBufferDelete:
    def test_delete_next_char(self):
        buf = _at(".name", 0)
        assert buf.delete_next_char() is True
        assert buf.text == "name"

    def test_delete_next_char_at_end(self):
        buf = QueryBuffer(".name")
        assert buf.delete_next_char() is False
        assert buf.text == ".name"

    def test_delete_char(self):
        buf = _at(".name", 1)
        assert buf.delete_char() is True
        assert buf.text == "name"
        assert buf.cursor_col == 0

    def test_delete_char_at_start(self):
        buf = _at(".name", 0)
        assert buf.delete_char() is False

    def test_delete_line_by_end(self):
        buf = _at(".name.first", 5)
        assert buf.delete_line_by_end() is True
        assert buf.text == ".name"
        assert buf.yank_text == ".first"

    def test_delete_line_by_head(self):
        buf = _at(".name.first", 5)
        assert buf.delete_line_by_head() is True
        assert buf.text == ".first"
        assert buf.cursor_col == 0

    def test_delete_word_before(self):
        buf = QueryBuffer(".name | keys")
        assert buf.delete_word_before() is True
        assert buf.text == ".name | "


class TestBufferMotion:
    """Word-wise cursor motions."""

    def test_back_and_forward_are_clamped(self):
        buf = _at("ab", 0)
        buf.move_cursor(CursorMove.BACK)
        assert buf.cursor_col == 0
        buf.move_cursor(CursorMove.END)
        buf.move_cursor(CursorMove.FORWARD)
        assert buf.cursor_col == 2

    def test_head_and_end(self):
        buf = _at(".name", 2)
        buf.move_cursor(CursorMove.HEAD)
        assert buf.cursor_col == 0
        buf.move_cursor(CursorMove.END)
        assert buf.cursor_col == 5

    def test_word_forward(self):
        buf = _at(".name.first", 0)
        buf.move_cursor(CursorMove.WORD_FORWARD)
        assert buf.cursor_col == 1
        buf.move_cursor(CursorMove.WORD_FORWARD)
        assert buf.cursor_col == 6
        buf.move_cursor(CursorMove.WORD_FORWARD)
        assert buf.cursor_col == 11

    def test_word_back(self):
        buf = QueryBuffer(".name.first")
        buf.move_cursor(CursorMove.WORD_BACK)
        assert buf.cursor_col == 6
        buf.move_cursor(CursorMove.WORD_BACK)
        assert buf.cursor_col == 1
        buf.move_cursor(CursorMove.WORD_BACK)
        assert buf.cursor_col == 0

    def test_word_end(self):
        buf = _at(".name.first", 0)
        buf.move_cursor(CursorMove.WORD_END)
        assert buf.cursor_col == 4
        buf.move_cursor(CursorMove.WORD_END)
        assert buf.cursor_col == 10

    def test_word_end_at_line_end(self):
        buf = QueryBuffer(".name")
        buf.move_cursor(CursorMove.WORD_END)
        assert buf.cursor_col == 5


class TestBufferSelection:
    def test_cut_forward_selection(self):
        buf = _at(".name.first", 5)
        buf.start_selection()
        buf.move_cursor(CursorMove.END)
        assert buf.selection_range() == (5, 11)
        assert buf.cut() is True
        assert buf.text == ".name"
        assert buf.yank_text == ".first"
        assert buf.selection_anchor is None

    def test_cut_backward_selection(self):
        buf = _at(".name.first", 5)
        buf.start_selection()
        buf.move_cursor(CursorMove.HEAD)
        assert buf.cut() is True
        assert buf.text == ".first"
        assert buf.cursor_col == 0

    def test_cut_empty_selection(self):
        buf = _at(".name", 0)
        buf.start_selection()
        buf.move_cursor(CursorMove.BACK)
        assert buf.cut() is False
        assert buf.text == ".name"
        assert buf.undo_stack == []

    def test_cut_without_selection(self):
        buf = QueryBuffer(".name")
        assert buf.cut() is False

    def test_cancel_selection(self):
        buf = _at(".name", 1)
        buf.start_selection()
        buf.move_cursor(CursorMove.END)
        buf.cancel_selection()
        assert buf.selection_range() is None
        assert buf.text == ".name"


class TestBufferUndoRedo:
    """Tests for undo/redo functionality."""

    def test_undo_restores_content(self):
        buf = QueryBuffer()
        buf.insert_str(".name")
        assert buf.undo() is True
        assert buf.text == ""

    def test_redo_restores_content(self):
        buf = QueryBuffer()
        buf.insert_str(".name")
        buf.undo()
        assert buf.redo() is True
        assert buf.text == ".name"
        assert buf.cursor_col == 5

    def test_undo_nothing_to_undo(self):
        assert QueryBuffer(".a").undo() is False

    def test_redo_nothing_to_redo(self):
        assert QueryBuffer(".a").redo() is False

    def test_new_edit_clears_redo_stack(self):
        buf = QueryBuffer()
        buf.insert_str(".a")
        buf.undo()
        buf.insert_str(".b")
        assert buf.redo_stack == []
        assert buf.redo() is False

    def test_undo_stack_is_bounded(self):
        buf = QueryBuffer()
        for _ in range(UNDO_LIMIT + 20):
            buf.insert_str("x")
        assert len(buf.undo_stack) == UNDO_LIMIT


class TestBufferInput:
    """Insert-mode key input."""

    def test_printable_inserts(self):
        buf = QueryBuffer()
        assert buf.input(key(".")) is True
        assert buf.input(key("a")) is True
        assert buf.text == ".a"

    def test_space_inserts(self):
        buf = QueryBuffer(".a")
        assert buf.input(key("space", " ")) is True
        assert buf.text == ".a "

    def test_backspace(self):
        buf = QueryBuffer(".ab")
        assert buf.input(key("backspace", "\x08")) is True
        assert buf.text == ".a"

    def test_delete(self):
        buf = _at(".ab", 0)
        assert buf.input(key("delete")) is True
        assert buf.text == "ab"

    def test_arrows_move_without_change(self):
        buf = QueryBuffer(".ab")
        assert buf.input(key("left")) is False
        assert buf.cursor_col == 2
        assert buf.input(key("home")) is False
        assert buf.cursor_col == 0
        assert buf.input(key("end")) is False
        assert buf.cursor_col == 3

    def test_tab_is_ignored(self):
        buf = QueryBuffer(".a")
        assert buf.input(key("tab", "\t")) is False
        assert buf.text == ".a"

    def test_ctrl_w_deletes_word(self):
        buf = QueryBuffer(".user.name")
        assert buf.input(key("ctrl+w", "\x17")) is True
        assert buf.text == ".user."

    def test_ctrl_k_deletes_to_end(self):
        buf = _at(".user.name", 5)
        assert buf.input(key("ctrl+k", "\x0b")) is True
        assert buf.text == ".user"

    def test_unknown_key_is_ignored(self):
        buf = QueryBuffer(".a")
        assert buf.input(key("f5")) is False
        assert buf.text == ".a"
