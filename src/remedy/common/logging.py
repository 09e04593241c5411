"""Shared logging helpers for remedy."""

from __future__ import annotations

import logging
import os

from remedy.config.errors import ConfigurationError

LOG_LEVEL_ENV = "REMEDY_LOG_LEVEL"


def get_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``REMEDY_LOG_LEVEL`` or ``default`` when unset."""

    name = os.getenv(LOG_LEVEL_ENV)
    if name is None or not name.strip():
        return default
    level = logging.getLevelNamesMapping().get(name.strip().upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level in {LOG_LEVEL_ENV}: {name}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the
    level defaults to ``REMEDY_LOG_LEVEL`` (or INFO) and the format is terse.
    Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
