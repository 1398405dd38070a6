"""Query console Textual widget."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from jqv.autocomplete import SuggestionType
from jqv.controller import EditorController
from jqv.keymap import EditorMode, Focus


class QueryConsole(Widget, can_focus=True):
    """Results pane, suggestion popup, query line and status bar.

    All state lives in the :class:`EditorController`; this widget only
    forwards keys and draws snapshots of it.
    """

    DEFAULT_CSS = """
    QueryConsole {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    POPUP_ROWS = 8

    _MODE_STYLE = {
        EditorMode.NORMAL: "bold white on dark_green",
        EditorMode.INSERT: "bold white on dark_blue",
        EditorMode.OPERATOR: "bold white on dark_orange",
    }
    _KIND_LABEL = {
        SuggestionType.FIELD: "field",
        SuggestionType.FUNCTION: "fn",
        SuggestionType.OPERATOR: "op",
        SuggestionType.PATTERN: "pattern",
    }

    # -- Messages ----------------------------------------------------------

    @dataclass
    class Quit(Message):
        output: str | None  # None means print nothing

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        controller: EditorController,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.controller: EditorController = controller

    # =====================================================================
    # Key handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()

        ctrl = self.controller
        ctrl.handle_key(event)
        if ctrl.should_quit():
            self.post_message(self.Quit(ctrl.output_text()))
        self.refresh()

    # =====================================================================
    # Rendering
    # =====================================================================

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if height < 4 or width < 10:
            return Text("(too small)")

        ctrl = self.controller
        # keep the highlighted entry inside the popup window
        selected = ctrl.autocomplete.selected_index or 0
        first = max(0, selected - self.POPUP_ROWS + 1)
        popup = ctrl.autocomplete.suggestions[first : first + self.POPUP_ROWS]
        view = ctrl.results_view
        view.set_viewport_height(max(1, height - 3 - len(popup)))

        result = Text()
        self._render_results(result, width)
        self._render_popup(result, popup, selected - first, width)
        result.append("─" * width + "\n", style="dim cyan")
        self._render_query(result)
        self._render_status(result, width)
        return result

    def _render_results(self, out: Text, width: int) -> None:
        ctrl = self.controller
        view = ctrl.results_view
        lines = ctrl.display_text().split("\n")
        error_rows = 0 if ctrl.result.ok else len(ctrl.result.text.split("\n"))
        top = view.scroll_offset
        shown = lines[top : top + view.viewport_height]
        for i, line in enumerate(shown, start=top):
            if i < error_rows:
                out.append(line[:width], style="red")
            elif error_rows:
                out.append(line[:width], style="dim")
            else:
                out.append_text(Text.from_ansi(line)[:width])
            out.append("\n")
        for _ in range(view.viewport_height - len(shown)):
            out.append("~\n", style="dim blue")

    def _render_popup(self, out: Text, popup: list, selected: int, width: int) -> None:
        for i, suggestion in enumerate(popup):
            label = self._KIND_LABEL[suggestion.kind]
            row = f" {suggestion.text:<20} {label:<8} {suggestion.description or ''}"
            style = "reverse bold" if i == selected else "on grey23"
            out.append(row[:width].ljust(width), style=style)
            out.append("\n")

    def _render_query(self, out: Text) -> None:
        buf = self.controller.buffer
        line = buf.text
        cursor_col = buf.cursor_col
        sel = buf.selection_range()
        focused = self.controller.focus is Focus.INPUT_FIELD
        out.append("> ", style="bold cyan" if focused else "dim")
        for col, ch in enumerate(line):
            style = "white"
            if sel and sel[0] <= col < sel[1]:
                style = "on dark_blue"
            if focused and col == cursor_col:
                style = f"reverse {style}"
            out.append(ch, style=style)
        # Cursor block at end of line
        if focused and cursor_col >= len(line):
            out.append(" ", style="reverse")
        out.append("\n")

    def _render_status(self, out: Text, width: int) -> None:
        ctrl = self.controller
        mode = ctrl.mode
        mode_label = f" {mode.name} "
        out.append(mode_label, style=self._MODE_STYLE[mode])
        focus_label = " RESULTS " if ctrl.focus is Focus.RESULTS_PANE else ""
        if focus_label:
            out.append(focus_label, style="bold white on grey37")
        status_msg = ctrl.status_msg
        view = ctrl.results_view
        pos = f" {view.scroll_offset + 1}/{max(1, view.line_count)} "
        spacer_len = max(
            0, width - len(mode_label) - len(focus_label) - len(pos) - len(status_msg) - 2
        )
        out.append(f"  {status_msg}", style="bold yellow" if mode is EditorMode.OPERATOR else "")
        if spacer_len:
            out.append(" " * spacer_len)
        out.append(pos, style="bold")
