"""Logging setup and structured event logging for nodotfs."""

from __future__ import annotations

import logging

from .redaction import DataRedactor
from .structured import StructuredLogger, create_logger

__all__ = [
    "DataRedactor",
    "StructuredLogger",
    "create_logger",
    "configure_logging",
]


def configure_logging(level: str = "info") -> None:
    """Configure stdlib logging for the ``nodotfs`` logger tree.

    Unknown level names fall back to INFO.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("nodotfs").setLevel(numeric)
