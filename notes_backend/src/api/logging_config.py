"""Logging setup for the notes backend."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger (idempotent)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("src.api").setLevel(level.upper())
