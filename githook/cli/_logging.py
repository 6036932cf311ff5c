"""Process-wide logging setup for the ``githook`` command."""

from __future__ import annotations

import logging


def configure_logging(level: str = "INFO", prefix: str = "") -> None:
    """Configure the root logger once for the daemon.

    *prefix* (the relay application name, when there is one) starts every
    line so several daemons can share a log.
    """
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if prefix:
        fmt = f"{prefix} {fmt}"
    logging.basicConfig(level=level.upper(), format=fmt, force=True)
