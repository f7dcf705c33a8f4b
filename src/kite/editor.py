from __future__ import annotations

import errno
import logging
import os
import time
from typing import Callable, Protocol

from .buffer import Document
from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_F,
    CTRL_H,
    CTRL_L,
    CTRL_Q,
    CTRL_S,
    DEL_KEY,
    END_KEY,
    ENTER,
    ESC,
    HOME_KEY,
    KITE_QUERY_LEN,
    KITE_QUIT_TIMES,
    PAGE_DOWN,
    PAGE_UP,
    TAB,
)
from .fileio import load_lines, write_all
from .screen import compose_frame
from .search import IncrementalSearch
from .viewport import Viewport

logger = logging.getLogger(__name__)

PromptCallback = Callable[[str, int], None]

MOVEMENT_KEYS = (ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, HOME_KEY, END_KEY, PAGE_UP, PAGE_DOWN)


class TerminalLike(Protocol):
    def read_key(self) -> int: ...

    def write(self, data: bytes) -> None: ...

    def window_size(self) -> tuple[int, int]: ...


def is_insertable(c: int) -> bool:
    return c == TAB or (32 <= c < 256 and c != BACKSPACE)


class Editor:
    """One editing session: a document, its viewport and the key loop."""

    def __init__(self, terminal: TerminalLike) -> None:
        self.terminal = terminal
        self.doc = Document()
        self.view = Viewport(self.doc)
        self.statusmsg = ""
        self.statusmsg_time = 0.0
        self.quit_times = KITE_QUIT_TIMES
        self._drawing = False
        self._resize_pending = False
        self.update_window_size()

    def update_window_size(self) -> None:
        rows, cols = self.terminal.window_size()
        # Two lines are reserved for the status and message bars.
        self.view.resize(rows - 2, cols)

    def handle_sigwinch(self, _signum: int, _frame) -> None:
        self._resize_pending = True
        # A frame being written picks the new size up when it finishes.
        if not self._drawing:
            self.refresh_screen()

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.statusmsg = fmt % args if args else fmt
        self.statusmsg_time = time.time()

    def refresh_screen(self) -> None:
        self._drawing = True
        try:
            while True:
                if self._resize_pending:
                    self._resize_pending = False
                    self.update_window_size()
                self.terminal.write(compose_frame(self))
                if not self._resize_pending:
                    break
        finally:
            self._drawing = False

    def open_file(self, filename: str) -> None:
        self.doc.set_filename(filename)
        try:
            lines = load_lines(filename)
        except FileNotFoundError:
            logger.info("%s does not exist, starting a new file", filename)
            return
        self.doc.load(lines)
        logger.info("opened %s (%d rows)", filename, self.doc.numrows)

    def save(self) -> None:
        if not self.doc.filename:
            filename = self.prompt("Save as: %s (ESC to cancel)")
            if filename is None:
                self.set_status_message("Save aborted")
                return
            self.doc.set_filename(filename)

        data = self.doc.rows_to_string().encode("latin-1")
        try:
            written = write_all(self.doc.filename, data)
        except OSError as exc:
            logger.warning("saving %s failed: %s", self.doc.filename, exc)
            self.set_status_message("Can't save! I/O error: %s", os.strerror(exc.errno or errno.EIO))
            return
        self.doc.dirty = 0
        logger.info("wrote %d bytes to %s", written, self.doc.filename)
        self.set_status_message("%d bytes written on disk", written)

    def prompt(self, template: str, callback: PromptCallback | None = None) -> str | None:
        """Read a line in the message bar, repainting after every key.

        Returns the entered text, or ``None`` if Escape was pressed.
        ``callback`` sees the buffer and key after each keypress.
        """
        buf = ""
        while True:
            self.set_status_message(template, buf)
            self.refresh_screen()

            c = self.terminal.read_key()
            if c in (DEL_KEY, CTRL_H, BACKSPACE):
                buf = buf[:-1]
            elif c == ESC:
                self.set_status_message("")
                if callback is not None:
                    callback(buf, c)
                return None
            elif c == ENTER:
                if buf:
                    self.set_status_message("")
                    if callback is not None:
                        callback(buf, c)
                    return buf
            elif 32 <= c < 128 and c != BACKSPACE and len(buf) < KITE_QUERY_LEN:
                buf += chr(c)

            if callback is not None:
                callback(buf, c)

    def find(self) -> None:
        self.prompt("Search: %s (Use ESC/Arrows/Enter)", IncrementalSearch(self.view))

    def insert_char(self, c: str) -> None:
        cursor = self.view.cursor
        self.doc.insert_char(cursor.cy, cursor.cx, c)
        cursor.cx += 1
        self.view.remember_column()

    def insert_newline(self) -> None:
        cursor = self.view.cursor
        self.doc.split_row(cursor.cy, cursor.cx)
        cursor.cy += 1
        cursor.cx = 0
        self.view.remember_column()

    def del_char(self) -> None:
        cursor = self.view.cursor
        if cursor.cy >= self.doc.numrows:
            return
        cursor.cy, cursor.cx = self.doc.delete_char(cursor.cy, cursor.cx)
        self.view.remember_column()

    def del_forward(self) -> None:
        cursor = self.view.cursor
        row = self.view.current_row()
        if row is None:
            return
        if cursor.cx == row.size and cursor.cy == self.doc.numrows - 1:
            return
        self.view.move_right()
        self.del_char()

    def confirm_quit(self) -> bool:
        if self.doc.dirty and self.quit_times > 0:
            self.set_status_message(
                "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                self.quit_times,
            )
            self.quit_times -= 1
            return False
        return True

    def process_keypress(self) -> bool:
        """Handle one key. Returns ``False`` once the session should end."""
        c = self.terminal.read_key()

        if c == CTRL_Q:
            return not self.confirm_quit()

        if c == ENTER:
            self.insert_newline()
        elif c == CTRL_S:
            self.save()
        elif c == CTRL_F:
            self.find()
        elif c in (BACKSPACE, CTRL_H):
            self.del_char()
        elif c == DEL_KEY:
            self.del_forward()
        elif c in MOVEMENT_KEYS:
            self.view.move_cursor(c)
        elif c in (CTRL_L, ESC):
            pass
        elif is_insertable(c):
            self.insert_char(chr(c))

        self.quit_times = KITE_QUIT_TIMES
        return True

    def run(self) -> int:
        self.set_status_message("HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find")
        while True:
            self.refresh_screen()
            if not self.process_keypress():
                return 0
