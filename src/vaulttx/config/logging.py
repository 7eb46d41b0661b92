"""Shared logging helpers for vaulttx."""

from __future__ import annotations

import logging

from .errors import ConfigurationError

_LEVELS = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def parse_log_level(value: str | None) -> int:
    """Map a ``LOG_LEVEL`` style name onto a logging level, defaulting to INFO."""

    if value is None or not value.strip():
        return logging.INFO
    try:
        return _LEVELS[value.strip().upper()]
    except KeyError:
        raise ConfigurationError(f"Unknown log level: {value}") from None
