"""Database settings used when the SQLAlchemy adapter builds its own engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .errors import ConfigurationError, MissingConfigurationError

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
SQL_ECHO_ENV: Final[str] = "REMEDY_SQL_ECHO"

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _read_flag(name: str) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return False
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Expected a boolean in {name}, got {raw!r}")


def get_database_config() -> DatabaseConfig:
    """Return the database settings from ``DATABASE_URI`` and ``REMEDY_SQL_ECHO``."""

    uri = os.getenv(DATABASE_URI_ENV)
    if uri is None or not uri.strip():
        raise MissingConfigurationError([DATABASE_URI_ENV])
    return DatabaseConfig(uri=uri.strip(), echo=_read_flag(SQL_ECHO_ENV))
