"""Logging setup for the worldcal command line.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
CLI is the one place that attaches handlers, and only when the host has not
configured logging already.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_for(verbosity: int) -> int:
    """0 -> WARNING (clamped dates, skipped variants), 1 -> INFO, 2+ -> DEBUG."""
    return max(logging.DEBUG, logging.WARNING - 10 * verbosity)


def configure_logging(verbosity: int = 0, log_files: Sequence[str] = ()) -> bool:
    """
    Log to stderr and to every path in ``log_files`` (parent directories are
    created). Returns False and changes nothing when the root logger already
    has handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        return False
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    for entry in log_files:
        path = Path(entry)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    logging.basicConfig(level=level_for(verbosity), format=LOG_FORMAT, datefmt=DATE_FORMAT, handlers=handlers)
    return True
