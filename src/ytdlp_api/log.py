"""Logging setup for yt-dlp-api.

Modules obtain loggers through :func:`get_logger`; the process entry
point calls :func:`configure_logging` once to attach a Rich handler to
the package logger and to aiohttp's loggers.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER: str = "ytdlp_api"
ACCESS_LOGGER: str = "aiohttp.access"

_ATTACHED_LOGGERS: tuple[str, ...] = (
    PACKAGE_LOGGER,
    ACCESS_LOGGER,
    "aiohttp.server",
    "aiohttp.web",
)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Names outside ``ytdlp_api`` (e.g. ``__main__``) are re-parented so
    that :func:`configure_logging` still applies to them.
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def _has_rich_handler(logger: logging.Logger) -> bool:
    return any(isinstance(handler, RichHandler) for handler in logger.handlers)


def configure_logging(level: str | int = "INFO") -> None:
    """Attach a stderr :class:`RichHandler` and set *level*.

    Safe to call more than once; handlers are not duplicated.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    else:
        resolved = level

    for name in _ATTACHED_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        if not _has_rich_handler(logger):
            logger.addHandler(
                RichHandler(
                    console=Console(stderr=True),
                    show_path=False,
                    rich_tracebacks=True,
                )
            )
        logger.propagate = False
