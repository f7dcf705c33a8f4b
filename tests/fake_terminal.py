"""Scripted terminal for driving an ``Editor`` without a tty."""

from __future__ import annotations

from collections.abc import Iterable


class FakeTerminal:
    """Feeds queued key codes and records every frame written.

    Reading past the end of the script raises ``RuntimeError`` so a test
    that forgets to quit fails instead of hanging.
    """

    def __init__(self, keys: Iterable[int | str] = (), rows: int = 24, columns: int = 80) -> None:
        self.rows = rows
        self.columns = columns
        self.frames: list[bytes] = []
        self._keys: list[int] = []
        self.feed(keys)

    def feed(self, keys: Iterable[int | str]) -> None:
        for key in keys:
            if isinstance(key, str):
                self._keys.extend(ord(ch) for ch in key)
            else:
                self._keys.append(key)

    def read_key(self) -> int:
        if not self._keys:
            raise RuntimeError("key script exhausted")
        return self._keys.pop(0)

    def write(self, data: bytes) -> None:
        self.frames.append(data)

    def window_size(self) -> tuple[int, int]:
        return self.rows, self.columns

    @property
    def pending(self) -> int:
        return len(self._keys)

    @property
    def last_frame(self) -> bytes:
        return self.frames[-1]
