from __future__ import annotations

import argparse
import logging
import os
import signal
import sys

from .constants import ANSI_CLEAR_SCREEN, ANSI_CURSOR_HOME, KITE_VERSION
from .editor import Editor
from .log import configure_logging
from .terminal import Terminal, TerminalError

logger = logging.getLogger("kite")

CLEAR_AND_HOME = (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kite", description="A small terminal text editor.")
    parser.add_argument("filename", nargs="?", help="File to open; omit to start with an empty buffer.")
    parser.add_argument("--log-file", default=None, help="Write a debug log to this file (default: $KITE_LOG)")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    parser.add_argument("--version", action="version", version=f"kite {KITE_VERSION}")
    return parser


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        print("kite: stdin/stdout must be a tty", file=sys.stderr)
        return 1

    terminal = Terminal(stdin_fd, stdout_fd)
    try:
        with terminal.raw_mode():
            try:
                editor = Editor(terminal)
                if args.filename:
                    editor.open_file(args.filename)
                signal.signal(signal.SIGWINCH, editor.handle_sigwinch)
                status = editor.run()
            finally:
                terminal.write(CLEAR_AND_HOME)
    except TerminalError as exc:
        logger.error("fatal terminal error: %s", exc)
        print(f"kite: {exc.strerror or exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        logger.error("fatal error: %s", exc)
        print(f"kite: {exc}", file=sys.stderr)
        return 1
    return status


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
