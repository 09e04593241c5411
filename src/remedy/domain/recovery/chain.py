"""Split trailing recovery handlers off variadic argument lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remedy.domain.errors import HandlerArgumentError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from remedy.domain.recovery.verdicts import Handler


def is_handler(candidate: object) -> bool:
    """Return whether ``candidate`` can be used as a recovery handler.

    Classes and strings are never handlers, so column names and model types
    passed positionally are not mistaken for one.
    """

    return callable(candidate) and not isinstance(candidate, (type, str))


def split_handlers(args: Sequence[object]) -> tuple[tuple[object, ...], tuple[Handler, ...]]:
    """Split ``args`` into leading positional values and the trailing handler run.

    Handlers keep the order in which they were supplied.
    """

    cut = len(args)
    while cut > 0 and is_handler(args[cut - 1]):
        cut -= 1
    handlers: tuple[Handler, ...] = tuple(args[cut:])  # type: ignore[assignment]
    return tuple(args[:cut]), handlers


def require_handlers(args: Sequence[object]) -> tuple[Handler, ...]:
    """Return ``args`` as a handler chain, rejecting anything that is not a handler."""

    leading, handlers = split_handlers(args)
    if leading:
        raise HandlerArgumentError(f"Expected only recovery handlers, got {list(args)!r}")
    return handlers


def split_construct_args(args: Sequence[object]) -> tuple[bool, tuple[Handler, ...]]:
    """Split constructor arguments into the from-store flag and the handler chain.

    At most one ``bool`` (or ``None``) may precede the handlers.
    """

    leading, handlers = split_handlers(args)
    if not leading:
        return False, handlers
    *rest, flag = leading
    if rest or not (flag is None or isinstance(flag, bool)):
        raise HandlerArgumentError(f"Invalid arguments passed to constructor: {list(args)!r}")
    return bool(flag), handlers
