"""Infrastructure: logging sink configuration.

Library modules only ever call ``logging.getLogger(__name__)``.  This
module installs the single handler — a Rich handler writing to stderr so
that log records never interleave with command output on stdout.
"""

from __future__ import annotations

import logging

from cmdshell.exceptions import ConfigurationError, EnvironmentError

_ROOT_LOGGER = "cmdshell"


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(
            f"Unknown log level: {level}",
            hint="Use DEBUG, INFO, WARNING, ERROR or CRITICAL.",
        )
    return resolved


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a Rich handler to the ``cmdshell`` logger and set its level.

    Calling this again replaces the previously installed handler.
    """
    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(_resolve_level(level))

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
