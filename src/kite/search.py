from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from .buffer import rx_to_cx
from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ENTER,
    ESC,
    HL_MATCH,
)
from .models import Row, SearchState
from .viewport import Viewport


def find_next_match(rows: Sequence[Row], query: str, last_match: int, direction: int) -> tuple[int, int] | None:
    """Scan at most once around the document from ``last_match``.

    Returns ``(row index, render offset)`` of the first hit.
    """
    numrows = len(rows)
    current = last_match
    for _ in range(numrows):
        current += direction
        if current == -1:
            current = numrows - 1
        elif current == numrows:
            current = 0
        pos = rows[current].render.find(query)
        if pos != -1:
            return current, pos
    return None


class IncrementalSearch:
    """Prompt callback that moves the cursor to matches as the query changes.

    The cursor and viewport in effect when the search starts are restored
    if it is cancelled with Escape.
    """

    def __init__(self, view: Viewport) -> None:
        self.view = view
        self.state = SearchState()
        self.saved_cursor = replace(view.cursor)

    def restore_highlight(self) -> None:
        state = self.state
        rows = self.view.doc.rows
        if state.saved_hl is not None and 0 <= state.saved_hl_line < len(rows):
            rows[state.saved_hl_line].hl = state.saved_hl
        state.saved_hl = None
        state.saved_hl_line = -1

    def __call__(self, query: str, key: int) -> None:
        state = self.state
        self.restore_highlight()

        if key in (ENTER, ESC):
            if key == ESC:
                self.view.cursor = replace(self.saved_cursor)
            state.last_match = -1
            state.direction = 1
            return
        if key in (ARROW_RIGHT, ARROW_DOWN):
            state.direction = 1
        elif key in (ARROW_LEFT, ARROW_UP):
            state.direction = -1
        else:
            state.last_match = -1
            state.direction = 1

        if state.last_match == -1:
            state.direction = 1
        if not query:
            return

        doc = self.view.doc
        match = find_next_match(doc.rows, query, state.last_match, state.direction)
        if match is None:
            return

        match_row, offset = match
        row = doc.rows[match_row]
        state.last_match = match_row
        self.view.move_to(match_row, rx_to_cx(row, offset))
        # Scroll() pulls rowoff back so the match lands on the top line.
        self.view.cursor.rowoff = doc.numrows

        state.saved_hl_line = match_row
        state.saved_hl = row.hl.copy()
        for i in range(offset, min(offset + len(query), row.rsize)):
            row.hl[i] = HL_MATCH
