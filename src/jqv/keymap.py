"""Modal key dispatch for the query console.

``dispatch`` is a pure function from ``(EditorState, key)`` to a
:class:`Transition`.  It never touches the buffer; it only describes the
buffer operations, popup action, scrolling and session flags that the
controller should apply.

Key events only need ``.key`` (Textual key name) and ``.character``.

Supported commands:
  GLOBAL : ctrl+c  tab (accept)  shift+tab (focus)  q  enter  shift/alt+enter
  INSERT : typing  backspace/delete  ctrl+w ctrl+k  esc  up/down (popup)
  NORMAL : h l 0 $ w b e  i a I A  x X D C  u ctrl+r  d{motion} c{motion}
  RESULTS: j k J K g G  pageup/pagedown  ctrl+u/ctrl+d
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable

from jqv.buffer import CursorMove

SCROLL_STEP = 10


class EditorMode(Enum):
    NORMAL = auto()
    INSERT = auto()
    OPERATOR = auto()


class Focus(Enum):
    INPUT_FIELD = auto()
    RESULTS_PANE = auto()


class OutputMode(Enum):
    QUERY = auto()
    RESULTS = auto()


class BufferOp(Enum):
    INPUT = auto()
    MOVE = auto()
    DELETE_NEXT_CHAR = auto()
    DELETE_CHAR = auto()
    DELETE_LINE_BY_END = auto()
    DELETE_LINE_BY_HEAD = auto()
    START_SELECTION = auto()
    CANCEL_SELECTION = auto()
    CUT = auto()
    UNDO = auto()
    REDO = auto()


class PopupAction(Enum):
    HIDE = auto()
    SELECT_NEXT = auto()
    SELECT_PREVIOUS = auto()
    ACCEPT = auto()


class Scroll(Enum):
    LINE_DOWN = auto()
    LINE_UP = auto()
    STEP_DOWN = auto()
    STEP_UP = auto()
    TOP = auto()
    BOTTOM = auto()
    HALF_PAGE_UP = auto()
    HALF_PAGE_DOWN = auto()


@dataclass(frozen=True)
class EditorState:
    focus: Focus = Focus.INPUT_FIELD
    mode: EditorMode = EditorMode.INSERT
    pending_op: str = ""  # "d" or "c" while mode is OPERATOR

    def enter(self, mode: EditorMode, pending_op: str = "") -> EditorState:
        return replace(self, mode=mode, pending_op=pending_op)


BufferStep = tuple[BufferOp, object]


@dataclass(frozen=True)
class Transition:
    state: EditorState
    ops: tuple[BufferStep, ...] = ()
    popup: PopupAction | None = None
    scroll: Scroll | None = None
    reexecute: bool = False  # re-run the query if the text changed
    refresh_autocomplete: bool = False
    quit: bool = False
    output_mode: OutputMode | None = None


_MOTIONS: dict[str, CursorMove] = {
    "h": CursorMove.BACK,
    "left": CursorMove.BACK,
    "l": CursorMove.FORWARD,
    "right": CursorMove.FORWARD,
    "0": CursorMove.HEAD,
    "home": CursorMove.HEAD,
    "$": CursorMove.END,
    "end": CursorMove.END,
    "w": CursorMove.WORD_FORWARD,
    "b": CursorMove.WORD_BACK,
    "e": CursorMove.WORD_END,
}

_SCROLLS: dict[str, Scroll] = {
    "j": Scroll.LINE_DOWN,
    "down": Scroll.LINE_DOWN,
    "k": Scroll.LINE_UP,
    "up": Scroll.LINE_UP,
    "J": Scroll.STEP_DOWN,
    "K": Scroll.STEP_UP,
    "g": Scroll.TOP,
    "home": Scroll.TOP,
    "G": Scroll.BOTTOM,
    "pageup": Scroll.HALF_PAGE_UP,
    "ctrl+u": Scroll.HALF_PAGE_UP,
    "pagedown": Scroll.HALF_PAGE_DOWN,
    "ctrl+d": Scroll.HALF_PAGE_DOWN,
}


def key_name(event) -> str:
    """Printable character if there is one, else the Textual key name."""
    char = event.character
    if char and len(char) == 1 and char.isprintable():
        return char
    return event.key


# =====================================================================
# Global keys
# =====================================================================

Rule = Callable[[EditorState, object, bool], "Transition | None"]


def _interrupt(state: EditorState, event, visible: bool) -> Transition | None:
    if event.key == "ctrl+c":
        return Transition(state, quit=True)
    return None


def _accept_suggestion(state: EditorState, event, visible: bool) -> Transition | None:
    if event.key == "tab" and state.focus is Focus.INPUT_FIELD and visible:
        return Transition(state, popup=PopupAction.ACCEPT, reexecute=True)
    return None


def _toggle_focus(state: EditorState, event, visible: bool) -> Transition | None:
    if event.key not in ("shift+tab", "backtab"):
        return None
    if state.focus is Focus.INPUT_FIELD:
        return Transition(replace(state, focus=Focus.RESULTS_PANE))
    return Transition(replace(state, focus=Focus.INPUT_FIELD))


def _quit(state: EditorState, event, visible: bool) -> Transition | None:
    if key_name(event) == "q" and state.mode is not EditorMode.INSERT:
        return Transition(state, quit=True)
    return None


def _submit_query(state: EditorState, event, visible: bool) -> Transition | None:
    if event.key in ("shift+enter", "alt+enter"):
        return Transition(state, quit=True, output_mode=OutputMode.QUERY)
    return None


def _submit_results(state: EditorState, event, visible: bool) -> Transition | None:
    if event.key == "enter":
        return Transition(state, quit=True, output_mode=OutputMode.RESULTS)
    return None


# evaluated in order; first match wins
GLOBAL_RULES: tuple[Rule, ...] = (
    _interrupt,
    _accept_suggestion,
    _toggle_focus,
    _quit,
    _submit_query,
    _submit_results,
)


# =====================================================================
# Focus-scoped dispatch
# =====================================================================


def dispatch(state: EditorState, event, *, suggestions_visible: bool = False) -> Transition:
    for rule in GLOBAL_RULES:
        transition = rule(state, event, suggestions_visible)
        if transition is not None:
            return transition

    if state.focus is Focus.RESULTS_PANE:
        return _handle_results(state, event)
    if state.mode is EditorMode.INSERT:
        return _handle_insert(state, event, suggestions_visible)
    if state.mode is EditorMode.NORMAL:
        return _handle_normal(state, event, suggestions_visible)
    return _handle_operator(state, event)


# -- INSERT ------------------------------------------------------------


def _handle_insert(state: EditorState, event, visible: bool) -> Transition:
    key = event.key
    if key == "escape":
        if visible:
            return Transition(state, popup=PopupAction.HIDE)
        return Transition(state.enter(EditorMode.NORMAL))
    if visible and key == "down":
        return Transition(state, popup=PopupAction.SELECT_NEXT)
    if visible and key == "up":
        return Transition(state, popup=PopupAction.SELECT_PREVIOUS)
    return Transition(
        state,
        ops=((BufferOp.INPUT, event),),
        reexecute=True,
        refresh_autocomplete=True,
    )


# -- NORMAL ------------------------------------------------------------


def _handle_normal(state: EditorState, event, visible: bool) -> Transition:
    name = key_name(event)

    if name == "escape":
        if visible:
            return Transition(state, popup=PopupAction.HIDE)
        return Transition(state)

    # movement
    if name in _MOTIONS:
        return Transition(state, ops=((BufferOp.MOVE, _MOTIONS[name]),))

    insert = EditorMode.INSERT
    # enter insert mode
    if name == "i":
        return Transition(state.enter(insert))
    if name == "a":
        return Transition(state.enter(insert), ops=((BufferOp.MOVE, CursorMove.FORWARD),))
    if name == "I":
        return Transition(state.enter(insert), ops=((BufferOp.MOVE, CursorMove.HEAD),))
    if name == "A":
        return Transition(state.enter(insert), ops=((BufferOp.MOVE, CursorMove.END),))

    # single-key edits
    if name == "x":
        return Transition(state, ops=((BufferOp.DELETE_NEXT_CHAR, None),), reexecute=True)
    if name == "X":
        return Transition(state, ops=((BufferOp.DELETE_CHAR, None),), reexecute=True)
    if name == "D":
        return Transition(state, ops=((BufferOp.DELETE_LINE_BY_END, None),), reexecute=True)
    if name == "C":
        return Transition(
            state.enter(insert),
            ops=((BufferOp.DELETE_LINE_BY_END, None), (BufferOp.CANCEL_SELECTION, None)),
            reexecute=True,
        )
    if name == "u":
        return Transition(state, ops=((BufferOp.UNDO, None),), reexecute=True)
    if name == "ctrl+r":
        return Transition(state, ops=((BufferOp.REDO, None),), reexecute=True)

    # operators wait for a motion
    if name in ("d", "c"):
        return Transition(
            state.enter(EditorMode.OPERATOR, name),
            ops=((BufferOp.START_SELECTION, None),),
        )

    return Transition(state)


# -- OPERATOR ----------------------------------------------------------


def _handle_operator(state: EditorState, event) -> Transition:
    op = state.pending_op
    name = key_name(event)
    after = state.enter(EditorMode.INSERT if op == "c" else EditorMode.NORMAL)

    # dd / cc
    if name == op:
        return Transition(
            after,
            ops=(
                (BufferOp.CANCEL_SELECTION, None),
                (BufferOp.DELETE_LINE_BY_HEAD, None),
                (BufferOp.DELETE_LINE_BY_END, None),
            ),
            reexecute=True,
        )

    motion = _MOTIONS.get(name)
    if motion is None:
        return Transition(
            state.enter(EditorMode.NORMAL), ops=((BufferOp.CANCEL_SELECTION, None),)
        )

    ops: list[BufferStep] = [(BufferOp.MOVE, motion)]
    if motion is CursorMove.WORD_END:
        # include the character under the cursor
        ops.append((BufferOp.MOVE, CursorMove.FORWARD))
    ops.append((BufferOp.CUT, None))
    return Transition(after, ops=tuple(ops), reexecute=True)


# -- RESULTS -----------------------------------------------------------


def _handle_results(state: EditorState, event) -> Transition:
    scroll = _SCROLLS.get(key_name(event))
    if scroll is None:
        return Transition(state)
    return Transition(state, scroll=scroll)
