from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from remedy.adapters.sqlalchemy import shutdown, startup
from remedy.domain.recovery import error_notifications
from tests.helpers.models import Base

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def reset_error_notifications() -> Iterator[None]:
    error_notifications.clear()
    yield
    error_notifications.clear()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def started(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, metadata=Base.metadata, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()
