"""SQLAlchemy adapter package for remedy."""

from __future__ import annotations

from .record import Record, RecordValues, ValidationErrors
from .recoverable import Recoverable
from .session import (
    StartupError,
    configured_engine,
    create_all_tables,
    current_session,
    is_started,
    remove_session,
    shutdown,
    startup,
)
from .unit_of_work import RecordUnitOfWork

__all__ = [
    "Record",
    "RecordUnitOfWork",
    "RecordValues",
    "Recoverable",
    "StartupError",
    "ValidationErrors",
    "configured_engine",
    "create_all_tables",
    "current_session",
    "is_started",
    "remove_session",
    "shutdown",
    "startup",
]
