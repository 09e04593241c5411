"""Error types raised by records and the recovery protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


class RemedyError(Exception):
    """Base class for all errors raised by remedy."""


class ValidationFailed(RemedyError):
    """Raised when a mutation does not pass validation.

    ``errors`` maps attribute names to their messages. When it is given the
    exception message is built from it, so handlers can match on ``str(exc)``.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.errors: dict[str, list[str]] = {
            attribute: list(messages) for attribute, messages in (errors or {}).items()
        }
        if message is None:
            message = ", ".join(
                f"{attribute} {text}"
                for attribute, messages in self.errors.items()
                for text in messages
            )
        super().__init__(message or "validation failed")


class MassAssignmentRestricted(ValidationFailed):
    """Raised when a payload names a column that may not be assigned."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"{column} doesn't exist or access is restricted to it")


class HandlerContractError(RemedyError):
    """Raised when a recovery handler returns a value outside its contract."""

    def __init__(self, handler: object, value: object, subject_type: type) -> None:
        self.handler = handler
        self.value = value
        super().__init__(
            "A recovery handler must return either None, 'raise', 'retry' or an "
            f"instance of {subject_type.__name__}; {handler!r} returned {value!r}"
        )


class HandlerArgumentError(RemedyError, TypeError):
    """Raised when trailing arguments cannot be split into payload and handlers."""
