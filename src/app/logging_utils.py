"""Logging helpers for the dice game."""

from __future__ import annotations

import logging
import sys


def configure_logging(*, level: str | int = "WARNING") -> None:
    """Configure root logging once.

    Game narration goes to stdout through ``print``; log records go to stderr
    so the two never interleave in redirected output.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(process)d] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


__all__ = ["configure_logging"]
