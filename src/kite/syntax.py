from __future__ import annotations

import logging
from collections.abc import Sequence

from .constants import (
    C_HL_EXTENSIONS,
    C_HL_KEYWORDS1,
    C_HL_KEYWORDS2,
    HL_COMMENT,
    HL_HIGHLIGHT_NUMBERS,
    HL_HIGHLIGHT_STRINGS,
    HL_KEYWORD1,
    HL_KEYWORD2,
    HL_MATCH,
    HL_MLCOMMENT,
    HL_NORMAL,
    HL_NUMBER,
    HL_STRING,
    SEPARATORS,
    WHITESPACE,
)
from .models import Row, SyntaxDefinition

logger = logging.getLogger(__name__)


HLDB: list[SyntaxDefinition] = [
    SyntaxDefinition(
        filetype="c",
        filematch=C_HL_EXTENSIONS,
        keywords1=C_HL_KEYWORDS1,
        keywords2=C_HL_KEYWORDS2,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HL_HIGHLIGHT_STRINGS | HL_HIGHLIGHT_NUMBERS,
    ),
]


def is_separator(c: str) -> bool:
    return not c or c == "\0" or c in WHITESPACE or c in SEPARATORS


def syntax_to_color(hl: int) -> int:
    if hl in (HL_COMMENT, HL_MLCOMMENT):
        return 36
    if hl == HL_KEYWORD1:
        return 33
    if hl == HL_KEYWORD2:
        return 32
    if hl == HL_STRING:
        return 35
    if hl == HL_NUMBER:
        return 31
    if hl == HL_MATCH:
        return 34
    return 37


def select_syntax(filename: str | None, table: Sequence[SyntaxDefinition] = HLDB) -> SyntaxDefinition | None:
    """Pick the first definition whose patterns match ``filename``.

    Patterns starting with ``.`` must match the end of the name, any
    other pattern may appear anywhere in it.
    """
    if not filename:
        return None
    for syntax in table:
        for pattern in syntax.filematch:
            if pattern.startswith("."):
                if filename.endswith(pattern):
                    return syntax
            elif pattern in filename:
                return syntax
    return None


def _keyword_table(syntax: SyntaxDefinition) -> list[tuple[str, int]]:
    table = [(kw, HL_KEYWORD1) for kw in syntax.keywords1]
    table += [(kw, HL_KEYWORD2) for kw in syntax.keywords2]
    table.sort(key=lambda item: len(item[0]), reverse=True)
    return table


def highlight_row(row: Row, syntax: SyntaxDefinition | None, in_comment: bool) -> bool:
    """Classify every render column of ``row``.

    ``in_comment`` is the open-comment state inherited from the previous
    row. Returns the state this row leaves open for the next one.
    """
    row.hl = [HL_NORMAL] * row.rsize
    if syntax is None:
        return False

    keywords = _keyword_table(syntax)
    scs = syntax.singleline_comment_start
    mcs = syntax.multiline_comment_start
    mce = syntax.multiline_comment_end
    strings = bool(syntax.flags & HL_HIGHLIGHT_STRINGS)
    numbers = bool(syntax.flags & HL_HIGHLIGHT_NUMBERS)

    p = row.render
    hl = row.hl
    prev_sep = True
    in_string = ""
    i = 0

    while i < len(p):
        ch = p[i]
        prev_hl = hl[i - 1] if i > 0 else HL_NORMAL

        if scs and not in_string and not in_comment and p.startswith(scs, i):
            for h in range(i, len(p)):
                hl[h] = HL_COMMENT
            break

        if mcs and mce and not in_string:
            if in_comment:
                if p.startswith(mce, i):
                    for h in range(i, i + len(mce)):
                        hl[h] = HL_MLCOMMENT
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                    continue
                hl[i] = HL_MLCOMMENT
                i += 1
                continue
            if p.startswith(mcs, i):
                for h in range(i, i + len(mcs)):
                    hl[h] = HL_MLCOMMENT
                i += len(mcs)
                in_comment = True
                continue

        if strings:
            if in_string:
                hl[i] = HL_STRING
                if ch == "\\" and i + 1 < len(p):
                    hl[i + 1] = HL_STRING
                    i += 2
                    continue
                if ch == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if ch in ('"', "'"):
                in_string = ch
                hl[i] = HL_STRING
                i += 1
                continue

        if numbers:
            if ("0" <= ch <= "9" and (prev_sep or prev_hl == HL_NUMBER)) or (ch == "." and prev_hl == HL_NUMBER):
                hl[i] = HL_NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = False
            for kw, mark in keywords:
                end = i + len(kw)
                tail = p[end] if end < len(p) else ""
                if p.startswith(kw, i) and is_separator(tail):
                    for h in range(i, end):
                        hl[h] = mark
                    i = end
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(ch)
        i += 1

    return in_comment


def update_syntax(rows: Sequence[Row], idx: int, syntax: SyntaxDefinition | None) -> None:
    """Re-highlight ``rows[idx]`` and every following row whose inherited
    comment state changes as a result."""
    while 0 <= idx < len(rows):
        row = rows[idx]
        in_comment = idx > 0 and rows[idx - 1].hl_open_comment
        open_comment = highlight_row(row, syntax, in_comment)
        changed = row.hl_open_comment != open_comment
        row.hl_open_comment = open_comment
        if not changed:
            return
        idx += 1


def update_all(rows: Sequence[Row], syntax: SyntaxDefinition | None) -> None:
    for idx, row in enumerate(rows):
        in_comment = idx > 0 and rows[idx - 1].hl_open_comment
        row.hl_open_comment = highlight_row(row, syntax, in_comment)
    logger.debug("re-highlighted %d rows with %s", len(rows), syntax.filetype if syntax else "no syntax")
