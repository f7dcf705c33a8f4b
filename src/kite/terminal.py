from __future__ import annotations

import errno
import fcntl
import logging
import os
import re
import struct
import termios
from contextlib import AbstractContextManager
from typing import Callable

from .constants import (
    CSI_LETTER_MAP,
    CSI_TILDE_MAP,
    ESC,
    SS3_LETTER_MAP,
)

logger = logging.getLogger(__name__)

_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)R")


class TerminalError(OSError):
    """The controlling terminal cannot be used; the editor must exit."""


def _read_byte_once(fd: int) -> int | None:
    try:
        data = os.read(fd, 1)
    except InterruptedError:
        return None
    if not data:
        return None
    return data[0]


def _read_byte_blocking(fd: int) -> int:
    while True:
        try:
            c = _read_byte_once(fd)
        except OSError as exc:
            if exc.errno == errno.EAGAIN:
                continue
            raise TerminalError(exc.errno, "read from terminal failed") from exc
        if c is not None:
            return c


def decode_key(first: int, read_byte: Callable[[], int | None]) -> int:
    """Turn ``first`` and any escape sequence after it into a key code.

    ``read_byte`` returns ``None`` once the read timeout expires, in which
    case the sequence so far is reported as a plain Escape.
    """
    if first != ESC:
        return first

    seq0 = read_byte()
    if seq0 is None:
        return ESC
    seq1 = read_byte()
    if seq1 is None:
        return ESC

    if seq0 == ord("["):
        if ord("0") <= seq1 <= ord("9"):
            seq2 = read_byte()
            if seq2 is None or seq2 != ord("~"):
                return ESC
            return CSI_TILDE_MAP.get(seq1, ESC)
        return CSI_LETTER_MAP.get(seq1, ESC)
    if seq0 == ord("O"):
        return SS3_LETTER_MAP.get(seq1, ESC)
    return ESC


def read_key(fd: int) -> int:
    c = _read_byte_blocking(fd)
    return decode_key(c, lambda: _read_byte_once(fd))


def parse_cursor_report(buf: bytes) -> tuple[int, int]:
    match = _CURSOR_REPORT.match(buf)
    if not match:
        raise TerminalError(errno.EIO, "invalid cursor position response")
    return int(match.group(1)), int(match.group(2))


def _write_query(ofd: int, data: bytes) -> None:
    try:
        n = os.write(ofd, data)
    except OSError as exc:
        raise TerminalError(exc.errno, "terminal query write failed") from exc
    if n != len(data):
        raise TerminalError(errno.EIO, "terminal query write failed")


def get_cursor_position(ifd: int, ofd: int) -> tuple[int, int]:
    _write_query(ofd, b"\x1b[6n")

    buf = bytearray()
    while len(buf) < 31:
        c = _read_byte_once(ifd)
        if c is None:
            break
        buf.append(c)
        if c == ord("R"):
            break
    return parse_cursor_report(bytes(buf))


def get_window_size(ifd: int, ofd: int) -> tuple[int, int]:
    try:
        packed = fcntl.ioctl(ofd, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
        rows, cols, _, _ = struct.unpack("HHHH", packed)
        if cols:
            return rows, cols
    except OSError:
        pass

    logger.info("TIOCGWINSZ unavailable, asking the terminal for cursor reports")
    orig_row, orig_col = get_cursor_position(ifd, ofd)
    _write_query(ofd, b"\x1b[999C\x1b[999B")
    rows, cols = get_cursor_position(ifd, ofd)
    _write_query(ofd, f"\x1b[{orig_row};{orig_col}H".encode())
    logger.info("cursor reports give %dx%d", cols, rows)
    return rows, cols


class RawMode(AbstractContextManager["RawMode"]):
    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._orig: list | None = None

    def __enter__(self) -> "RawMode":
        if not os.isatty(self.fd):
            raise TerminalError(errno.ENOTTY, "stdin is not a tty")

        try:
            self._orig = termios.tcgetattr(self.fd)
            raw = termios.tcgetattr(self.fd)
            raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
            raw[1] &= ~termios.OPOST
            raw[2] |= termios.CS8
            raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
            raw[6][termios.VMIN] = 0
            raw[6][termios.VTIME] = 1
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except termios.error as exc:
            raise TerminalError(errno.EIO, f"unable to enter raw mode: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._orig is None:
            return
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._orig)
        except termios.error:
            logger.warning("failed to restore terminal attributes", exc_info=True)
        self._orig = None


class Terminal:
    """The controlling terminal as seen by the editor session."""

    def __init__(self, ifd: int, ofd: int) -> None:
        self.ifd = ifd
        self.ofd = ofd

    def raw_mode(self) -> RawMode:
        return RawMode(self.ifd)

    def read_key(self) -> int:
        return read_key(self.ifd)

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            n = os.write(self.ofd, view)
            view = view[n:]

    def window_size(self) -> tuple[int, int]:
        try:
            rows, cols = get_window_size(self.ifd, self.ofd)
        except TerminalError:
            raise
        except OSError as exc:
            raise TerminalError(exc.errno, "Unable to query the screen for size") from exc
        logger.debug("terminal size %dx%d", cols, rows)
        return rows, cols
