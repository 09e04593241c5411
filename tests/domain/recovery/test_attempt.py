from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from remedy.domain.errors import HandlerContractError, ValidationFailed
from remedy.domain.recovery import (
    RETRY,
    ErrorNotificationRegistry,
    attempt_with_recovery,
    construct_with_recovery,
)


@dataclass
class Widget:
    values: dict[str, Any] = field(default_factory=dict)
    is_new: bool = True


class FlakyOperation:
    """Fails validation until ``values`` carries a name."""

    def __init__(self, values: dict[str, Any]) -> None:
        self.values = values
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if not self.values.get("name"):
            raise ValidationFailed("name is required.")
        return f"saved {self.values['name']}"


def fill_name(cls: type, values: dict[str, Any]) -> object:
    if not values.get("name"):
        values["name"] = "filled"
        return RETRY
    return None


@pytest.fixture
def registry() -> ErrorNotificationRegistry:
    return ErrorNotificationRegistry()


def test_success_returns_result_without_handlers(registry: ErrorNotificationRegistry) -> None:
    values = {"name": "given"}
    operation = FlakyOperation(values)

    def unexpected(cls: type, values: dict[str, Any]) -> object:
        raise AssertionError("handler consulted on success")

    result = attempt_with_recovery(
        operation, Widget(values), values, [unexpected], registry=registry
    )

    assert result == "saved given"
    assert operation.calls == 1


def test_retry_uses_mutated_payload(registry: ErrorNotificationRegistry) -> None:
    values: dict[str, Any] = {}
    operation = FlakyOperation(values)

    result = attempt_with_recovery(
        operation, Widget(values), values, [fill_name], registry=registry
    )

    assert result == "saved filled"
    assert operation.calls == 2


def test_unresolved_failure_is_the_original_error(registry: ErrorNotificationRegistry) -> None:
    values: dict[str, Any] = {}
    notified: list[Widget] = []
    registry.register(Widget, notified.append)
    subject = Widget(values)

    with pytest.raises(ValidationFailed, match="name is required.") as exc:
        attempt_with_recovery(FlakyOperation(values), subject, values, [], registry=registry)

    assert type(exc.value) is ValidationFailed
    assert notified == [subject]


def test_retry_keeps_the_chain_for_later_failures(registry: ErrorNotificationRegistry) -> None:
    values: dict[str, Any] = {"step": 0}
    consulted: list[int] = []

    def operation() -> str:
        if values["step"] < 2:
            raise ValidationFailed(f"step {values['step']}")
        return "done"

    def advance(cls: type, values: dict[str, Any]) -> object:
        consulted.append(values["step"])
        values["step"] += 1
        return RETRY

    result = attempt_with_recovery(operation, Widget(values), values, [advance], registry=registry)

    assert result == "done"
    assert consulted == [0, 1]


def test_replacement_is_returned_directly(registry: ErrorNotificationRegistry) -> None:
    values: dict[str, Any] = {}
    existing = Widget({"name": "stored"}, is_new=False)
    operation = FlakyOperation(values)

    result = attempt_with_recovery(
        operation, Widget(values), values, [lambda cls, values: existing], registry=registry
    )

    assert result is existing
    assert operation.calls == 1


def test_other_exceptions_are_not_intercepted(registry: ErrorNotificationRegistry) -> None:
    def operation() -> None:
        raise ValueError("not a validation failure")

    with pytest.raises(ValueError, match="not a validation failure"):
        attempt_with_recovery(operation, Widget(), {}, [fill_name], registry=registry)


class Recorder:
    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls: list[tuple[dict[str, Any], bool]] = []

    def __call__(self, values: dict[str, Any], from_store: bool) -> None:
        self.calls.append((dict(values), from_store))
        if len(self.calls) <= self.failures:
            raise ValidationFailed("restricted doesn't exist or access is restricted to it")


def test_construction_adopts_stored_replacement(registry: ErrorNotificationRegistry) -> None:
    stored = Widget({"id": 1, "name": "stored"}, is_new=False)
    initialize = Recorder(failures=1)

    construct_with_recovery(
        initialize,
        Widget(),
        {"name": "new"},
        False,
        [lambda cls, values: stored],
        registry=registry,
    )

    assert initialize.calls == [({"name": "new"}, False), ({"id": 1, "name": "stored"}, True)]


def test_construction_adopts_unsaved_replacement_without_hydrating(
    registry: ErrorNotificationRegistry,
) -> None:
    draft = Widget({"name": "draft"}, is_new=True)
    initialize = Recorder(failures=1)

    construct_with_recovery(
        initialize, Widget(), {}, False, [lambda cls, values: draft], registry=registry
    )

    assert initialize.calls[-1] == ({"name": "draft"}, False)


def test_construction_propagates_unresolved_failure(registry: ErrorNotificationRegistry) -> None:
    with pytest.raises(ValidationFailed):
        construct_with_recovery(Recorder(failures=1), Widget(), {}, False, [], registry=registry)


def test_construction_rejects_invalid_verdict(registry: ErrorNotificationRegistry) -> None:
    with pytest.raises(HandlerContractError):
        construct_with_recovery(
            Recorder(failures=1), Widget(), {}, False, [lambda cls, values: 42], registry=registry
        )
