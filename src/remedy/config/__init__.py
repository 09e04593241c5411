"""Application configuration helpers."""

from __future__ import annotations

from .database import DatabaseConfig, get_database_config
from .errors import ConfigurationError, MissingConfigurationError

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "get_database_config",
]
