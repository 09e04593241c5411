"""Run fallible mutations under a recovery handler chain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar, cast

from remedy.domain.errors import ValidationFailed
from remedy.domain.recovery.resolver import resolve
from remedy.domain.recovery.verdicts import Directive, Replace

if TYPE_CHECKING:
    from collections.abc import Callable, MutableMapping, Sequence

    from remedy.domain.ports.persistence import RecoverableSubject
    from remedy.domain.recovery.notifications import ErrorNotificationRegistry
    from remedy.domain.recovery.verdicts import Handler

T = TypeVar("T")


def attempt_with_recovery(
    operation: Callable[[], T],
    subject: object,
    payload: MutableMapping[str, Any],
    handlers: Sequence[Handler],
    *,
    registry: ErrorNotificationRegistry | None = None,
) -> T:
    """Call ``operation``, consulting ``handlers`` whenever it fails validation.

    Retries reuse the same chain and whatever the handlers left in ``payload``.
    A replacement is returned in place of the operation's result; an unresolved
    failure is re-raised.
    """

    while True:
        try:
            return operation()
        except ValidationFailed as failure:
            verdict = resolve(handlers, subject, payload, failure, registry=registry)
            if verdict is Directive.RETRY:
                continue
            if isinstance(verdict, Replace):
                return cast("T", verdict.instance)
            raise


def construct_with_recovery(
    initialize: Callable[[MutableMapping[str, Any], bool], None],
    subject: object,
    values: MutableMapping[str, Any],
    from_store: bool,
    handlers: Sequence[Handler],
    *,
    registry: ErrorNotificationRegistry | None = None,
) -> None:
    """Initialise ``subject`` from ``values``, consulting ``handlers`` on failure.

    A constructor cannot hand back another object, so a replacement is
    adopted instead: its values become the new payload and, if it is already
    stored, the retried initialisation hydrates rather than builds afresh.
    """

    while True:
        try:
            initialize(values, from_store)
        except ValidationFailed as failure:
            verdict = resolve(handlers, subject, values, failure, registry=registry)
            if verdict is Directive.RETRY:
                continue
            if isinstance(verdict, Replace):
                replacement: RecoverableSubject = verdict.instance
                values = dict(replacement.values)
                from_store = from_store or not replacement.is_new
                continue
            raise
        else:
            return
