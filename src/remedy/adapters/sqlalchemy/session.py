"""Engine and session state shared by every record class."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from remedy.config import DatabaseConfig, get_database_config

if TYPE_CHECKING:
    from sqlalchemy import MetaData
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when records are used before the adapter is initialised."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _sessions: scoped_session[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        if self._sessions is not None:
            self._sessions.remove()
        self._sessions = None
        self._engine = value

    @property
    def sessions(self) -> scoped_session[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call remedy.adapters.sqlalchemy."
                "session.startup() before using records."
            )
        if self._sessions is None:
            # Validation queries must not flush half-built records.
            factory = sessionmaker(bind=self._engine, expire_on_commit=False, autoflush=False)
            self._sessions = scoped_session(factory)
        return self._sessions


_STATE = _AdapterState()


def create_all_tables(engine: Engine, metadata: MetaData) -> None:
    """Create all tables."""
    log.info("Creating all tables")
    metadata.create_all(engine)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    metadata: MetaData | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine and session registry, optionally creating tables."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = DatabaseConfig(uri=database_uri) if database_uri else get_database_config()
        engine = create_engine(config.uri, echo=config.echo)
    if metadata is not None:
        create_all_tables(engine, metadata)

    _STATE.engine = engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def current_session() -> Session:
    """Return the session bound to the calling thread."""

    return _STATE.sessions()


def remove_session() -> None:
    """Close and forget the calling thread's session."""

    if _STATE.engine is not None:
        _STATE.sessions.remove()


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    engine = _STATE.engine
    _STATE.engine = None
    if engine is not None:
        engine.dispose()
