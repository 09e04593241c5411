"""Persistence-facing protocols used by the recovery wrappers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import MutableMapping


@runtime_checkable
class RecoverableSubject(Protocol):
    """An object whose mutations can be recovered by handlers."""

    @property
    def values(self) -> MutableMapping[str, Any]: ...

    @property
    def is_new(self) -> bool: ...
