"""Logging setup for the ``aq`` package logger.

Modules log through ``logging.getLogger(__name__)``; this module
attaches a single Rich handler writing to stderr to the ``aq`` logger,
or a plain stream handler when Rich is not installed.
The level comes from the caller, else ``$AQ_LOG_LEVEL``, else WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

from aq.exceptions import EnvironmentError

LOG_LEVEL_ENV_VAR = "AQ_LOG_LEVEL"
LOGGER_NAME = "aq"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def resolve_level(
    level: str | int | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Turn a level name, number or ``None`` into a ``logging`` level."""
    if level is None:
        env = os.environ if environ is None else environ
        level = env.get(LOG_LEVEL_ENV_VAR, "WARNING")
    if isinstance(level, str):
        return _LEVELS.get(level.upper(), logging.WARNING)
    return level


def _build_rich_handler() -> logging.Handler:
    """Return a ``RichHandler`` on stderr or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )


def setup_logging(
    level: str | int | None = None,
    environ: Mapping[str, str] | None = None,
) -> logging.Logger:
    """Configure the ``aq`` logger; safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level, environ))

    for handler in list(logger.handlers):
        if getattr(handler, "_aq_handler", False):
            logger.removeHandler(handler)

    try:
        handler = _build_rich_handler()
    except EnvironmentError:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._aq_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
