from __future__ import annotations

import time
from typing import TYPE_CHECKING

from .constants import (
    ANSI_CLEAR_LINE,
    ANSI_CURSOR_HOME,
    ANSI_DEFAULT_FG,
    ANSI_HIDE_CURSOR,
    ANSI_INVERT_ON,
    ANSI_RESET,
    ANSI_SHOW_CURSOR,
    HL_NORMAL,
    KITE_FILENAME_WIDTH,
    KITE_MESSAGE_TIMEOUT,
    KITE_VERSION,
)
from .models import Row
from .syntax import syntax_to_color

if TYPE_CHECKING:
    from .editor import Editor


def _draw_row(ab: list[str], row: Row, coloff: int, screencols: int) -> None:
    chars = row.render[coloff : coloff + screencols]
    hl = row.hl[coloff : coloff + screencols]
    current_color = -1
    for ch, h in zip(chars, hl):
        code = ord(ch)
        if code < 32 or code == 127:
            sym = chr(ord("@") + code) if code <= 26 else "?"
            ab.append(ANSI_INVERT_ON)
            ab.append(sym)
            ab.append(ANSI_RESET)
            if current_color != -1:
                ab.append(f"\x1b[{current_color}m")
        elif h == HL_NORMAL:
            if current_color != -1:
                ab.append(ANSI_DEFAULT_FG)
                current_color = -1
            ab.append(ch)
        else:
            color = syntax_to_color(h)
            if color != current_color:
                ab.append(f"\x1b[{color}m")
                current_color = color
            ab.append(ch)
    ab.append(ANSI_DEFAULT_FG)


def _draw_welcome(ab: list[str], screencols: int) -> None:
    welcome = f"Kite editor -- version {KITE_VERSION}"[:screencols]
    padding = (screencols - len(welcome)) // 2
    if padding:
        ab.append("~")
        padding -= 1
    ab.append(" " * padding)
    ab.append(welcome)


def draw_rows(editor: Editor, ab: list[str]) -> None:
    doc = editor.doc
    view = editor.view
    for y in range(view.screenrows):
        filerow = y + view.cursor.rowoff
        if filerow >= doc.numrows:
            if doc.numrows == 0 and y == view.screenrows // 3:
                _draw_welcome(ab, view.screencols)
            else:
                ab.append("~")
        else:
            _draw_row(ab, doc.rows[filerow], view.cursor.coloff, view.screencols)
        ab.append(ANSI_CLEAR_LINE)
        ab.append("\r\n")


def draw_status_bar(editor: Editor, ab: list[str]) -> None:
    doc = editor.doc
    view = editor.view
    cols = view.screencols
    ab.append(ANSI_INVERT_ON)
    name = (doc.filename or "[No Name]")[:KITE_FILENAME_WIDTH]
    status = f"{name} - {doc.numrows} lines{' (modified)' if doc.dirty else ''}"[:cols]
    filetype = doc.syntax.filetype if doc.syntax else "no ft"
    rstatus = f"{filetype} | {view.cursor.cy + 1}/{doc.numrows}"
    ab.append(status)
    length = len(status)
    while length < cols:
        if cols - length == len(rstatus):
            ab.append(rstatus)
            break
        ab.append(" ")
        length += 1
    ab.append(ANSI_RESET)
    ab.append("\r\n")


def draw_message_bar(editor: Editor, ab: list[str], now: float) -> None:
    ab.append(ANSI_CLEAR_LINE)
    msg = editor.statusmsg[: editor.view.screencols]
    if msg and now - editor.statusmsg_time < KITE_MESSAGE_TIMEOUT:
        ab.append(msg)


def compose_frame(editor: Editor, now: float | None = None) -> bytes:
    """Build one complete frame; the caller writes it in a single call."""
    if now is None:
        now = time.time()
    view = editor.view
    view.scroll()

    ab: list[str] = [ANSI_HIDE_CURSOR, ANSI_CURSOR_HOME]
    draw_rows(editor, ab)
    draw_status_bar(editor, ab)
    draw_message_bar(editor, ab, now)

    c = view.cursor
    ab.append(f"\x1b[{c.cy - c.rowoff + 1};{c.rx - c.coloff + 1}H")
    ab.append(ANSI_SHOW_CURSOR)
    return "".join(ab).encode("latin-1", errors="replace")
