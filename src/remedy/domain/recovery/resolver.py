"""Consult a handler chain about a failed mutation and classify the outcome."""

from __future__ import annotations

from contextvars import ContextVar
from logging import getLogger
from typing import TYPE_CHECKING, Any

from remedy.domain.errors import HandlerContractError
from remedy.domain.recovery.notifications import error_notifications
from remedy.domain.recovery.verdicts import Directive, Replace

if TYPE_CHECKING:
    from collections.abc import MutableMapping, Sequence

    from remedy.domain.errors import ValidationFailed
    from remedy.domain.recovery.notifications import ErrorNotificationRegistry
    from remedy.domain.recovery.verdicts import Handler, Resolution

log = getLogger(__name__)

_active_failure: ContextVar[ValidationFailed | None] = ContextVar(
    "remedy_active_failure", default=None
)


def current_failure() -> ValidationFailed:
    """Return the failure being resolved; only valid while a handler runs."""

    failure = _active_failure.get()
    if failure is None:
        raise LookupError("current_failure() called outside of a recovery handler")
    return failure


def _first_verdict(
    handlers: Sequence[Handler],
    subject_type: type[Any],
    payload: MutableMapping[str, Any],
) -> tuple[Handler | None, object]:
    for handler in handlers:
        verdict = handler(subject_type, payload)
        if verdict is not None:
            return handler, verdict
    return None, None


def resolve(
    handlers: Sequence[Handler],
    subject: object,
    payload: MutableMapping[str, Any],
    failure: ValidationFailed,
    *,
    registry: ErrorNotificationRegistry | None = None,
) -> Resolution:
    """Run ``handlers`` in order until one gives a verdict.

    Returns ``Directive.RETRY``, a ``Replace`` wrapping the replacement, or
    ``Directive.RAISE`` once the subject's error callback has been notified.
    The caller re-raises ``failure`` on ``RAISE``. Exceptions raised by a
    handler propagate unchanged.
    """

    subject_type = type(subject)
    token = _active_failure.set(failure)
    try:
        handler, verdict = _first_verdict(handlers, subject_type, payload)
    finally:
        _active_failure.reset(token)

    # Non-string verdicts are never compared with ==.
    directive = verdict if isinstance(verdict, str) else None
    if verdict is None or directive == Directive.RAISE:
        log.debug(
            "Unresolved %s for %s after %d handler(s)",
            type(failure).__name__,
            subject_type.__name__,
            len(handlers),
        )
        (registry or error_notifications).notify(subject)
        return Directive.RAISE
    if directive == Directive.RETRY:
        log.debug("Handler %r asked to retry %s", handler, subject_type.__name__)
        return Directive.RETRY
    if type(verdict) is subject_type:
        log.debug("Handler %r supplied a replacement %s", handler, subject_type.__name__)
        return Replace(verdict)
    raise HandlerContractError(handler, verdict, subject_type)
