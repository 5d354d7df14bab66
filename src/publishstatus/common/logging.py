"""Shared logging helpers for publishstatus."""

from __future__ import annotations

import logging
import sys
from typing import Final

# httpx logs every request line at INFO.
TRANSPORT_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Send log records to stderr; stdout carries the JSON report.

    Transport libraries are held at WARNING unless ``level`` asks for debug
    output. Pass ``force=True`` to reconfigure in tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=force,
    )
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
