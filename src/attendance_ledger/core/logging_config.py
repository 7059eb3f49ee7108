"""Logging setup shared by the CLI entry points."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s level=%(levelname)s logger=%(name)s %(message)s"

_configured = False


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the package logger (idempotent)."""
    global _configured

    root = logging.getLogger("attendance_ledger")
    root.setLevel(level if isinstance(level, int) else str(level).upper())
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True
