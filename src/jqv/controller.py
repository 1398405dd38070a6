"""Editor controller: applies key transitions to the query session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from jqv._json_index import IndexParseError, JsonIndex
from jqv.autocomplete import AutocompleteEngine
from jqv.buffer import QueryBuffer
from jqv.executor import QueryResult
from jqv.keymap import (
    SCROLL_STEP,
    BufferOp,
    EditorMode,
    EditorState,
    Focus,
    OutputMode,
    PopupAction,
    Scroll,
    Transition,
    dispatch,
)

logger = logging.getLogger(__name__)

Executor = Callable[[str], QueryResult]


@dataclass
class ResultView:
    """Scroll window over the current result text."""

    scroll_offset: int = 0
    viewport_height: int = 20
    line_count: int = 0
    last_successful_text: str | None = None

    @property
    def max_scroll(self) -> int:
        return max(0, self.line_count - self.viewport_height)

    def _clamp(self) -> None:
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll))

    def set_content(self, text: str) -> None:
        self.line_count = len(text.split("\n")) if text else 0
        self._clamp()

    def set_viewport_height(self, height: int) -> None:
        self.viewport_height = max(0, height)
        self._clamp()

    def scroll(self, command: Scroll) -> None:
        half = self.viewport_height // 2
        offset = self.scroll_offset
        if command is Scroll.LINE_DOWN:
            offset += 1
        elif command is Scroll.LINE_UP:
            offset -= 1
        elif command is Scroll.STEP_DOWN:
            offset += SCROLL_STEP
        elif command is Scroll.STEP_UP:
            offset -= SCROLL_STEP
        elif command is Scroll.TOP:
            offset = 0
        elif command is Scroll.BOTTOM:
            offset = self.max_scroll
        elif command is Scroll.HALF_PAGE_UP:
            offset -= half
        elif command is Scroll.HALF_PAGE_DOWN:
            offset += half
        self.scroll_offset = offset
        self._clamp()


def _identity(document: str) -> Executor:
    def execute(query: str) -> QueryResult:
        return QueryResult.success(document)

    return execute


class EditorController:
    """Owns the query buffer, the editor state and the current result.

    One key is processed to completion (buffer edit, query re-run,
    suggestion refresh) before the next one is accepted.
    """

    def __init__(
        self,
        document: str,
        executor: Executor | None = None,
        *,
        viewport_height: int = 20,
    ) -> None:
        self.document: str = document
        self.executor: Executor = executor or _identity(document)
        self.index: JsonIndex = JsonIndex()
        try:
            self.index.analyze(document)
        except IndexParseError as e:
            # no field suggestions for this session
            logger.warning("field suggestions disabled: %s", e)
        self.buffer: QueryBuffer = QueryBuffer()
        self.autocomplete: AutocompleteEngine = AutocompleteEngine()
        self.results_view: ResultView = ResultView(viewport_height=viewport_height)
        self.state: EditorState = EditorState()
        self.result: QueryResult = QueryResult.success(document)
        self.results_view.last_successful_text = document
        self.results_view.set_content(document)
        self.status_msg: str = ""
        self._should_quit: bool = False
        self._output_mode: OutputMode | None = None

    # -- Read-only views ---------------------------------------------------

    @property
    def mode(self) -> EditorMode:
        return self.state.mode

    @property
    def focus(self) -> Focus:
        return self.state.focus

    @property
    def query(self) -> str:
        return self.buffer.text

    def should_quit(self) -> bool:
        return self._should_quit

    def output_mode(self) -> OutputMode | None:
        return self._output_mode

    def output_text(self) -> str | None:
        """What the surrounding process should print on exit, if anything."""
        if self._output_mode is OutputMode.QUERY:
            return self.query
        if self._output_mode is OutputMode.RESULTS:
            return self.result.text
        return None

    # -- Key handling ------------------------------------------------------

    def handle_key(self, event) -> Transition:
        transition = dispatch(
            self.state, event, suggestions_visible=self.autocomplete.is_visible()
        )
        self.apply(transition)
        return transition

    def apply(self, transition: Transition) -> None:
        self.state = transition.state
        changed = self._apply_ops(transition)

        popup = transition.popup
        if popup is PopupAction.ACCEPT:
            suggestion = self.autocomplete.selected()
            if suggestion is not None:
                changed = self.buffer.set_text(suggestion.text) or changed
            self.autocomplete.hide()
        elif popup is PopupAction.HIDE:
            self.autocomplete.hide()
        elif popup is PopupAction.SELECT_NEXT:
            self.autocomplete.select_next()
        elif popup is PopupAction.SELECT_PREVIOUS:
            self.autocomplete.select_previous()

        if transition.reexecute and changed:
            self.execute_query()
        if transition.refresh_autocomplete:
            self.autocomplete.refresh(self.query, self.buffer.cursor_col, self.index)
        if transition.scroll is not None:
            self.results_view.scroll(transition.scroll)

        if transition.quit:
            self._should_quit = True
            self._output_mode = transition.output_mode
            logger.debug("session ending, output mode %s", self._output_mode)

        self._update_status()

    def _apply_ops(self, transition: Transition) -> bool:
        buf = self.buffer
        changed = False
        for op, arg in transition.ops:
            if op is BufferOp.INPUT:
                changed = buf.input(arg) or changed
            elif op is BufferOp.MOVE:
                buf.move_cursor(arg)
            elif op is BufferOp.DELETE_NEXT_CHAR:
                changed = buf.delete_next_char() or changed
            elif op is BufferOp.DELETE_CHAR:
                changed = buf.delete_char() or changed
            elif op is BufferOp.DELETE_LINE_BY_END:
                changed = buf.delete_line_by_end() or changed
            elif op is BufferOp.DELETE_LINE_BY_HEAD:
                changed = buf.delete_line_by_head() or changed
            elif op is BufferOp.START_SELECTION:
                buf.start_selection()
            elif op is BufferOp.CANCEL_SELECTION:
                buf.cancel_selection()
            elif op is BufferOp.CUT:
                changed = buf.cut() or changed
            elif op is BufferOp.UNDO:
                changed = buf.undo() or changed
            elif op is BufferOp.REDO:
                changed = buf.redo() or changed
        return changed

    def execute_query(self) -> None:
        """Re-run the query; a failure keeps the last good result around."""
        self.result = self.executor(self.query)
        if self.result.ok:
            self.results_view.last_successful_text = self.result.text
        self.results_view.set_content(self.display_text())
        self.results_view.scroll_offset = 0

    def display_text(self) -> str:
        """Result pane text: the error, then the last good result below it."""
        if self.result.ok:
            return self.result.text
        last = self.results_view.last_successful_text
        if last is None:
            return self.result.text
        return f"{self.result.text}\n\n{last}"

    def _update_status(self) -> None:
        state = self.state
        if state.mode is EditorMode.OPERATOR:
            self.status_msg = state.pending_op
        elif state.mode is EditorMode.INSERT and state.focus is Focus.INPUT_FIELD:
            self.status_msg = "-- INSERT --"
        else:
            self.status_msg = ""
