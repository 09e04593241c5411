"""Per-class callbacks fired when a failure is left unresolved."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

ErrorCallback: TypeAlias = "Callable[[Any], object]"
C = TypeVar("C", bound="Callable[[Any], object]")

log = getLogger(__name__)


class ErrorNotificationRegistry:
    """Registry of unresolved-error callbacks keyed by class.

    Registration is configuration-time only; lookups happen on every
    unresolved failure. A class without its own callback falls back to the
    nearest ancestor that registered one.
    """

    def __init__(self) -> None:
        self._callbacks: dict[type, ErrorCallback] = {}

    def register(self, cls: type, callback: C) -> C:
        self._callbacks[cls] = callback
        return callback

    def unregister(self, cls: type) -> None:
        self._callbacks.pop(cls, None)

    def lookup(self, cls: type) -> ErrorCallback | None:
        callback = self._callbacks.get(cls)
        if callback is not None:
            return callback
        for parent in cls.__mro__[1:]:
            callback = self._callbacks.get(parent)
            if callback is not None:
                return callback
        return None

    def notify(self, subject: object) -> bool:
        """Invoke the callback registered for ``subject``'s class, if any."""

        callback = self.lookup(type(subject))
        if callback is None:
            return False
        log.debug("Notifying unresolved failure for %s", type(subject).__name__)
        callback(subject)
        return True

    def clear(self) -> None:
        self._callbacks.clear()


error_notifications = ErrorNotificationRegistry()
