"""Logging setup. The terminal belongs to the editor, so records only
ever go to a file."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_ENV_VAR = "KITE_LOG"


def configure_logging(log_file: str | None = None, level: str = "info") -> None:
    root = logging.getLogger("kite")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    path = log_file or os.environ.get(LOG_ENV_VAR)
    if not path:
        root.addHandler(logging.NullHandler())
        return

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))
    root.propagate = False
