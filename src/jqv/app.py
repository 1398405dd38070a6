"""Interactive jq console application."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Header

from jqv.controller import EditorController
from jqv.executor import JqExecutor, JqNotFoundError
from jqv.widget import QueryConsole

logger = logging.getLogger(__name__)


class JqvApp(App[str | None]):
    """TUI app that wraps the QueryConsole widget.

    ``run()`` returns the text to print on exit, or None.
    """

    CSS = """
    Screen {
        layout: vertical;
    }
    #console {
        height: 1fr;
        border: solid $accent;
    }
    """

    TITLE = "jqv"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, controller: EditorController, source: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self.source = source

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield QueryConsole(self.controller, id="console")

    def on_mount(self) -> None:
        self.sub_title = self.source or "[stdin]"
        self.query_one("#console").focus()

    def on_query_console_quit(self, event: QueryConsole.Quit) -> None:
        self.exit(event.output)


def _read_document(file_path: str) -> str:
    if file_path:
        return Path(file_path).read_text(encoding="utf-8")
    text = sys.stdin.read()
    # the UI needs a terminal on fd 0 once the piped document is consumed
    if not sys.stdin.isatty():
        with open("/dev/tty") as tty:
            os.dup2(tty.fileno(), 0)
    return text


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jqv",
        description="Interactive jq console with vim-style editing",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to query (reads stdin when omitted)",
    )
    parser.add_argument(
        "--jq",
        default="jq",
        metavar="PATH",
        help="jq binary to run queries with",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="write debug logs",
    )
    parser.add_argument(
        "--log-file",
        default="jqv.log",
        help="log file used with --debug",
    )
    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    try:
        document = _read_document(args.file)
    except OSError as exc:
        print(f"jqv: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        json.loads(document)
    except json.JSONDecodeError as e:
        print(f"jqv: invalid JSON: {e.msg} (line {e.lineno})", file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        print("jqv: invalid JSON: document is nested too deeply", file=sys.stderr)
        sys.exit(1)

    try:
        executor = JqExecutor(document, jq_path=args.jq)
    except JqNotFoundError as exc:
        print(f"jqv: {exc}", file=sys.stderr)
        sys.exit(1)

    controller = EditorController(document, executor)
    output = JqvApp(controller, source=args.file).run()
    logger.debug("exited with output mode %s", controller.output_mode())
    if output is not None:
        print(output)


if __name__ == "__main__":
    main()
