"""Recovery handler protocol for fallible mutations."""

from __future__ import annotations

from .attempt import attempt_with_recovery, construct_with_recovery
from .chain import is_handler, require_handlers, split_construct_args, split_handlers
from .notifications import ErrorNotificationRegistry, error_notifications
from .resolver import current_failure, resolve
from .verdicts import Directive, Handler, Replace, Resolution

RETRY = Directive.RETRY
RAISE = Directive.RAISE

__all__ = [
    "RAISE",
    "RETRY",
    "Directive",
    "ErrorNotificationRegistry",
    "Handler",
    "Replace",
    "Resolution",
    "attempt_with_recovery",
    "construct_with_recovery",
    "current_failure",
    "error_notifications",
    "is_handler",
    "require_handlers",
    "resolve",
    "split_construct_args",
    "split_handlers",
]
