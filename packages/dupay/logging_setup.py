"""Logging for ``dupay``.

The CLI prints its report on stdout; diagnostics go through the ``"dupay"``
logger tree to stderr. Library code only asks for loggers with
``get_logger("dupay.<module>")`` and never installs handlers, so importing
``dupay`` from another program stays silent until that program (or
:func:`configure_logging`) decides otherwise.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "dupay"
_LEVEL_ENV = "DUPAY_LOG_LEVEL"
_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    """Resolve ``level`` (int, name, or numeric string) to a logging level.

    ``None`` reads ``DUPAY_LOG_LEVEL``. Unknown names fall back to INFO.
    """

    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach one ``StreamHandler`` to the ``"dupay"`` logger.

    Only the first call has an effect. The logger stops propagating to the
    root logger so a host application's handlers do not print records twice.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level)
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FMT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
