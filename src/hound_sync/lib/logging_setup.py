"""Logging for hound_sync.

Library modules log through ``get_logger(__name__)`` and stay silent until
the ``hound-sync`` entrypoint calls ``configure_logging`` with the
``--log-level`` option or ``HOUND_SYNC_LOG_LEVEL``. Digest failures and
repaired account references are the main things worth seeing here.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "hound_sync"
_DEFAULT_LEVEL = logging.WARNING
_CONFIGURED = False


def _level_from_name(level: int | str) -> int | None:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    """Resolve a level; unknown names fall back to WARNING."""
    if level is not None:
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    env_val = os.getenv("HOUND_SYNC_LOG_LEVEL")
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return _DEFAULT_LEVEL


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a stream handler to the ``hound_sync`` logger. Only the first call counts."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
