from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SyntaxDefinition:
    filetype: str
    filematch: tuple[str, ...]
    keywords1: tuple[str, ...]
    keywords2: tuple[str, ...]
    singleline_comment_start: str
    multiline_comment_start: str
    multiline_comment_end: str
    flags: int


@dataclass(slots=True)
class Row:
    idx: int
    chars: str
    render: str = ""
    hl: list[int] = field(default_factory=list)
    hl_open_comment: bool = False

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)


@dataclass(slots=True)
class Cursor:
    """Cursor in character space plus the viewport origin.

    ``cy`` may equal the row count, which is the virtual line after the
    last row. ``rx`` is derived from ``cx`` once per frame.
    """

    cx: int = 0
    cy: int = 0
    rx: int = 0
    rowoff: int = 0
    coloff: int = 0
    preferred_cx: int = 0


@dataclass(slots=True)
class SearchState:
    last_match: int = -1
    direction: int = 1
    saved_hl_line: int = -1
    saved_hl: list[int] | None = None
