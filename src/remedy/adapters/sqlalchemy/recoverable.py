"""Record mutations that accept trailing recovery handlers.

Every mutating entry point takes its usual arguments followed by any number
of handlers. When the mutation fails validation the handlers are consulted in
order::

    def fill_required(cls, values):
        if values.get("required") is None:
            values["required"] = "default"
            return RETRY

    Widget.create({"name": "w"}, fill_required)
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Self, TypeVar, cast

from remedy.adapters.sqlalchemy.record import Record
from remedy.domain.recovery import (
    attempt_with_recovery,
    construct_with_recovery,
    error_notifications,
    require_handlers,
    split_construct_args,
    split_handlers,
)

if TYPE_CHECKING:
    from collections.abc import Callable, MutableMapping

    from remedy.domain.recovery import Handler

C = TypeVar("C", bound="Callable[[Any], object]")


def _columns_and_handlers(args: tuple[object, ...]) -> tuple[tuple[str, ...], tuple[Handler, ...]]:
    columns, handlers = split_handlers(args)
    return cast("tuple[str, ...]", columns), handlers


class Recoverable(Record):
    """Record whose mutations can be rescued by caller supplied handlers."""

    def __init__(
        self,
        values: MutableMapping[str, Any] | None = None,
        *args: object,
        setup: Callable[[Self], object] | None = None,
    ) -> None:
        from_store, handlers = split_construct_args(args)
        construct_with_recovery(
            partial(super().__init__, setup=setup),
            self,
            {} if values is None else values,
            from_store,
            handlers,
        )

    @classmethod
    def create(  # type: ignore[override]
        cls,
        values: MutableMapping[str, Any] | None = None,
        *handlers: Handler,
        setup: Callable[[Self], object] | None = None,
    ) -> Self:
        chain = require_handlers(handlers)
        return cls(values, *chain, setup=setup).save(*chain)

    @classmethod
    def on_error(cls, callback: C) -> C:
        """Register ``callback`` to receive records whose failures go unresolved.

        Subclasses without their own callback use the nearest ancestor's.
        """

        return error_notifications.register(cls, callback)

    def _recover(
        self,
        operation: Callable[[], Self],
        payload: MutableMapping[str, Any],
        handlers: tuple[Handler, ...],
    ) -> Self:
        try:
            return attempt_with_recovery(operation, self, payload, handlers)
        except Exception:
            self.discard_changes()
            raise

    def save(self, *args: object) -> Self:  # type: ignore[override]
        columns, handlers = _columns_and_handlers(args)
        return self._recover(partial(super().save, *columns), self.values, handlers)

    def update(  # type: ignore[override]
        self, values: MutableMapping[str, Any], *handlers: Handler
    ) -> Self:
        operation = partial(super().update, values)
        return self._recover(operation, values, require_handlers(handlers))

    def update_all(  # type: ignore[override]
        self, values: MutableMapping[str, Any], *handlers: Handler
    ) -> Self:
        operation = partial(super().update_all, values)
        return self._recover(operation, values, require_handlers(handlers))

    def update_only(  # type: ignore[override]
        self, values: MutableMapping[str, Any], *args: object
    ) -> Self:
        columns, handlers = _columns_and_handlers(args)
        operation = partial(super().update_only, values, *columns)
        return self._recover(operation, values, handlers)

    def update_except(  # type: ignore[override]
        self, values: MutableMapping[str, Any], *args: object
    ) -> Self:
        columns, handlers = _columns_and_handlers(args)
        operation = partial(super().update_except, values, *columns)
        return self._recover(operation, values, handlers)
