"""Logging setup for the TUI."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.logging import TextualHandler

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: int = logging.WARNING, file_path: str = "") -> None:
    """Route ``nodeedit`` log records to a file or the Textual devtools console.

    The terminal belongs to the app, so records never go to stdout/stderr.
    """
    logger = logging.getLogger("nodeedit")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = TextualHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
