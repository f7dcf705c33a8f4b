from __future__ import annotations

import errno
import os


def load_lines(path: str) -> list[str]:
    """Read ``path`` as one string per line, without line terminators.

    Bytes are decoded as Latin-1 so each byte stays one column.
    Raises ``FileNotFoundError`` or ``OSError``.
    """
    lines: list[str] = []
    with open(path, "rb") as f:
        for line in f:
            if line.endswith(b"\n"):
                line = line[:-1]
            if line.endswith(b"\r"):
                line = line[:-1]
            lines.append(line.decode("latin-1"))
    return lines


def write_all(path: str, data: bytes) -> int:
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        written = 0
        while written < len(data):
            n = os.write(fd, data[written:])
            if n <= 0:
                raise OSError(errno.EIO, "short write")
            written += n
    finally:
        os.close(fd)
    return written
