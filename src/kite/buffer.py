from __future__ import annotations

import logging
from collections.abc import Iterable

from .constants import KITE_TAB_STOP
from .models import Row, SyntaxDefinition
from .syntax import select_syntax, update_all, update_syntax

logger = logging.getLogger(__name__)


def expand_tabs(chars: str, tab_stop: int = KITE_TAB_STOP) -> str:
    out: list[str] = []
    idx = 0
    for ch in chars:
        if ch == "\t":
            out.append(" ")
            idx += 1
            while idx % tab_stop != 0:
                out.append(" ")
                idx += 1
        else:
            out.append(ch)
            idx += 1
    return "".join(out)


def cx_to_rx(row: Row, cx: int, tab_stop: int = KITE_TAB_STOP) -> int:
    rx = 0
    for ch in row.chars[:cx]:
        if ch == "\t":
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def rx_to_cx(row: Row, rx: int, tab_stop: int = KITE_TAB_STOP) -> int:
    """Return the character column whose render span first passes ``rx``."""
    cur_rx = 0
    for cx, ch in enumerate(row.chars):
        if ch == "\t":
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return row.size


class Document:
    """Ordered rows of one file plus its path, syntax and dirty counter.

    Every mutation re-renders and re-highlights the rows it touches
    before returning. Out of range row indices are ignored.
    """

    def __init__(self, filename: str | None = None) -> None:
        self.rows: list[Row] = []
        self.dirty = 0
        self.filename: str | None = None
        self.syntax: SyntaxDefinition | None = None
        if filename is not None:
            self.set_filename(filename)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def set_filename(self, filename: str) -> None:
        self.filename = filename
        self.syntax = select_syntax(filename)
        logger.info("syntax for %s: %s", filename, self.syntax.filetype if self.syntax else "none")
        update_all(self.rows, self.syntax)

    def load(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.insert_row(self.numrows, line)
        self.dirty = 0

    def update_row(self, row: Row) -> None:
        row.render = expand_tabs(row.chars)
        update_syntax(self.rows, row.idx, self.syntax)

    def _renumber(self, start: int) -> None:
        for j in range(start, self.numrows):
            self.rows[j].idx = j

    def insert_row(self, at: int, s: str) -> None:
        if at < 0 or at > self.numrows:
            return
        # Seed with the state the displaced row inherited so the cascade
        # only runs when the new row changes it.
        inherited = at > 0 and self.rows[at - 1].hl_open_comment
        self.rows.insert(at, Row(idx=at, chars=s, hl_open_comment=inherited))
        self._renumber(at + 1)
        self.update_row(self.rows[at])
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= self.numrows:
            return
        del self.rows[at]
        self._renumber(at)
        if at < self.numrows:
            update_syntax(self.rows, at, self.syntax)
        self.dirty += 1

    def row_insert_char(self, row: Row, at: int, c: str) -> None:
        at = max(0, min(at, row.size))
        row.chars = row.chars[:at] + c + row.chars[at:]
        self.update_row(row)
        self.dirty += 1

    def row_append_string(self, row: Row, s: str) -> None:
        row.chars += s
        self.update_row(row)
        self.dirty += 1

    def row_delete_char(self, row: Row, at: int) -> None:
        if at < 0 or at >= row.size:
            return
        row.chars = row.chars[:at] + row.chars[at + 1 :]
        self.update_row(row)
        self.dirty += 1

    def insert_char(self, cy: int, cx: int, c: str) -> None:
        if cy == self.numrows:
            self.insert_row(self.numrows, "")
        if cy < 0 or cy >= self.numrows:
            return
        self.row_insert_char(self.rows[cy], cx, c)

    def split_row(self, cy: int, cx: int) -> None:
        """Break row ``cy`` at ``cx``; the tail becomes the next row."""
        if cy == self.numrows:
            self.insert_row(self.numrows, "")
            return
        if cy < 0 or cy > self.numrows:
            return
        row = self.rows[cy]
        cx = max(0, min(cx, row.size))
        if cx == 0:
            self.insert_row(cy, "")
            return
        self.insert_row(cy + 1, row.chars[cx:])
        row.chars = row.chars[:cx]
        self.update_row(row)

    def delete_char(self, cy: int, cx: int) -> tuple[int, int]:
        """Delete the character before ``cx`` on row ``cy``.

        At column zero the row is joined onto the previous one. Returns
        the cursor position after the edit.
        """
        if cy < 0 or cy >= self.numrows:
            return cy, cx
        row = self.rows[cy]
        cx = max(0, min(cx, row.size))
        if cx == 0 and cy == 0:
            return cy, cx
        if cx > 0:
            self.row_delete_char(row, cx - 1)
            return cy, cx - 1
        prev = self.rows[cy - 1]
        new_cx = prev.size
        self.row_append_string(prev, row.chars)
        self.delete_row(cy)
        return cy - 1, new_cx

    def rows_to_string(self) -> str:
        return "".join(f"{row.chars}\n" for row in self.rows)
