"""Root logger setup for the appkiller command line.

Precedence, highest first: ``APPKILLER_LOG_LEVEL`` (level name or number),
``APPKILLER_DEBUG`` (truthy forces DEBUG), the ``--debug`` flag or persisted
``debug_logging`` setting, and finally WARNING.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "APPKILLER_LOG_LEVEL"
DEBUG_ENV = "APPKILLER_DEBUG"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_TRUTHY = {"1", "true", "yes", "on"}


def env_level() -> Optional[int]:
    """Level forced by the environment, or None when the environment is silent."""
    raw = os.getenv(LOG_LEVEL_ENV, "").strip()
    if raw:
        if raw.isdigit():
            return int(raw)
        named = logging.getLevelName(raw.upper())
        # Unknown names come back as "Level X" strings.
        return named if isinstance(named, int) else logging.INFO
    if os.getenv(DEBUG_ENV, "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def setup_logging(debug: bool = False) -> int:
    """Install the console handler once and set the root level; return that level."""
    level = env_level()
    if level is None:
        level = logging.DEBUG if debug else logging.WARNING
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_FORMAT, datefmt="%H:%M:%S")
    root.setLevel(level)
    return level
