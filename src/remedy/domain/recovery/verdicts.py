"""Verdicts a recovery handler may return and what the resolver makes of them."""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeAlias, TypeVar

T = TypeVar("T")


class Directive(StrEnum):
    """Explicit instructions a handler can give instead of a replacement."""

    RETRY = "retry"
    RAISE = "raise"


@dataclass(frozen=True, slots=True)
class Replace(Generic[T]):
    """A handler supplied a fully formed object to use instead of the failed one."""

    instance: T


Resolution: TypeAlias = "Directive | Replace[Any]"

# Called with the subject's class and the mutable payload. Returning None
# passes the failure on to the next handler.
Handler: TypeAlias = "Callable[[type[Any], MutableMapping[str, Any]], object]"
