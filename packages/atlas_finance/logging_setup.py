"""Logging for ``atlas_finance``.

Library modules log through ``get_logger("atlas_finance.<module>")`` and never
attach handlers. Output is switched on by the entrypoint: the CLI root
callback calls :func:`configure_logging`, which gives the ``atlas_finance``
logger one stream handler. Until then the package stays silent.

Row-level import fallbacks are logged at DEBUG only; at the default INFO level
an import logs just its row count.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "atlas_finance"
_LEVEL_ENV = "ATLAS_FINANCE_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    """Resolve ``level``, then ``ATLAS_FINANCE_LOG_LEVEL``, then INFO."""

    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach the package's stream handler; later calls are no-ops."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    pkg = logging.getLogger(_PKG_LOGGER_NAME)
    for h in [h for h in pkg.handlers if isinstance(h, logging.NullHandler)]:
        pkg.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    pkg.setLevel(resolved)
    pkg.addHandler(handler)
    pkg.propagate = False
    _CONFIGURED = True


def reset_logging() -> None:
    """Undo :func:`configure_logging` (tests invoke the CLI repeatedly)."""

    global _CONFIGURED
    pkg = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(pkg.handlers):
        pkg.removeHandler(h)
    pkg.setLevel(logging.NOTSET)
    pkg.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    pkg = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg.handlers:
        pkg.addHandler(logging.NullHandler())
    return logging.getLogger(name)
