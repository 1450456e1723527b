"""Logging setup for applications embedding the engine."""

import logging

from formcanvas.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging with the standard format.

    ``level`` defaults to ``Settings.log_level``. Hover recomputation logs at
    DEBUG, so per-pointer-move output only appears when asked for.
    """
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
    logging.getLogger("formcanvas").setLevel(level)
