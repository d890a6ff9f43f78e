"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def log_level() -> int:
    raw = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    level = logging.getLevelName(raw)
    # getLevelName returns a string for unknown names.
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging() -> None:
    logging.basicConfig(level=log_level(), format=LOG_FORMAT)
