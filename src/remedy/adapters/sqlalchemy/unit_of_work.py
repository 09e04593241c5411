"""Transaction boundary around the thread's record session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from remedy.adapters.sqlalchemy.session import StartupError, current_session, remove_session

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.orm import Session


class RecordUnitOfWork:
    """Commit record mutations made inside the block, or roll them back on error."""

    def __init__(self) -> None:
        self._session: Session | None = None

    def __enter__(self) -> RecordUnitOfWork:
        self._session = current_session()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self._session = None
        remove_session()
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
