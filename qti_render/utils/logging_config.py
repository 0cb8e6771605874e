"""Centralized logging configuration for the qti-render CLI.

Library modules only create module-level loggers; handlers and levels are
configured once here, by the command-line entry point.
"""

from __future__ import annotations

import logging

# Default format used across the CLI
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Root logger name for every module of the package
PACKAGE_LOGGER = "qti_render"


def setup_logging(verbose: bool = False, level: int | str | None = None) -> None:
    """Configure logging with consistent format.

    Args:
        verbose: If True, sets level to DEBUG. Overrides `level` parameter.
        level: Explicit logging level, either numeric or a level name such as
            "WARNING". Defaults to INFO if not specified.

    Example:
        >>> setup_logging()  # INFO level
        >>> setup_logging(verbose=True)  # DEBUG level
        >>> setup_logging(level="WARNING")  # WARNING level
    """
    if verbose:
        effective_level = logging.DEBUG
    elif level is not None:
        effective_level = _coerce_level(level)
    else:
        effective_level = logging.INFO

    logging.basicConfig(
        level=effective_level,
        format=DEFAULT_LOG_FORMAT,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(effective_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Names outside the package namespace are nested under it so that
    `setup_logging` controls them too.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        A Logger instance.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def _coerce_level(level: int | str) -> int:
    """Translate a level name into its numeric value."""
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric
