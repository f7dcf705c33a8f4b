from __future__ import annotations

from .buffer import Document, cx_to_rx
from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    END_KEY,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
)
from .models import Cursor, Row


class Viewport:
    """Moves the cursor over a document and keeps it on screen."""

    def __init__(self, doc: Document, screenrows: int = 1, screencols: int = 1) -> None:
        self.doc = doc
        self.cursor = Cursor()
        self.screenrows = screenrows
        self.screencols = screencols

    def resize(self, screenrows: int, screencols: int) -> None:
        self.screenrows = max(1, screenrows)
        self.screencols = max(1, screencols)

    def current_row(self) -> Row | None:
        cy = self.cursor.cy
        return self.doc.rows[cy] if 0 <= cy < self.doc.numrows else None

    def _row_len(self) -> int:
        row = self.current_row()
        return row.size if row is not None else 0

    def remember_column(self) -> None:
        self.cursor.preferred_cx = self.cursor.cx

    def move_to(self, cy: int, cx: int) -> None:
        self.cursor.cy = max(0, min(cy, self.doc.numrows))
        self.cursor.cx = max(0, min(cx, self._row_len()))
        self.remember_column()

    def move_left(self) -> None:
        c = self.cursor
        if c.cx > 0:
            c.cx -= 1
        elif c.cy > 0:
            c.cy -= 1
            c.cx = self._row_len()
        self.remember_column()

    def move_right(self) -> None:
        c = self.cursor
        row = self.current_row()
        if row is not None and c.cx < row.size:
            c.cx += 1
        elif row is not None and c.cx == row.size:
            c.cy += 1
            c.cx = 0
        self.remember_column()

    def _snap_column(self) -> None:
        self.cursor.cx = min(self.cursor.preferred_cx, self._row_len())

    def move_up(self) -> None:
        if self.cursor.cy > 0:
            self.cursor.cy -= 1
        self._snap_column()

    def move_down(self) -> None:
        if self.cursor.cy < self.doc.numrows:
            self.cursor.cy += 1
        self._snap_column()

    def move_home(self) -> None:
        self.cursor.cx = 0
        self.remember_column()

    def move_end(self) -> None:
        self.cursor.cx = self._row_len()
        self.remember_column()

    def page_up(self) -> None:
        self.cursor.cy = self.cursor.rowoff
        self._snap_column()
        for _ in range(self.screenrows):
            self.move_up()

    def page_down(self) -> None:
        self.cursor.cy = min(self.cursor.rowoff + self.screenrows - 1, self.doc.numrows)
        self._snap_column()
        for _ in range(self.screenrows):
            self.move_down()

    def move_cursor(self, key: int) -> None:
        if key == ARROW_LEFT:
            self.move_left()
        elif key == ARROW_RIGHT:
            self.move_right()
        elif key == ARROW_UP:
            self.move_up()
        elif key == ARROW_DOWN:
            self.move_down()
        elif key == HOME_KEY:
            self.move_home()
        elif key == END_KEY:
            self.move_end()
        elif key == PAGE_UP:
            self.page_up()
        elif key == PAGE_DOWN:
            self.page_down()

    def scroll(self) -> None:
        c = self.cursor
        row = self.current_row()
        c.rx = cx_to_rx(row, c.cx) if row is not None else 0

        if c.cy < c.rowoff:
            c.rowoff = c.cy
        if c.cy >= c.rowoff + self.screenrows:
            c.rowoff = c.cy - self.screenrows + 1
        if c.rx < c.coloff:
            c.coloff = c.rx
        if c.rx >= c.coloff + self.screencols:
            c.coloff = c.rx - self.screencols + 1
