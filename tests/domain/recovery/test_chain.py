from __future__ import annotations

import pytest

from remedy.domain.errors import HandlerArgumentError
from remedy.domain.recovery import (
    is_handler,
    require_handlers,
    split_construct_args,
    split_handlers,
)


def first(cls: type, values: dict[str, object]) -> None:
    return None


def second(cls: type, values: dict[str, object]) -> None:
    return None


def test_is_handler_excludes_classes_and_strings() -> None:
    assert is_handler(first)
    assert is_handler(lambda cls, values: None)
    assert not is_handler(dict)
    assert not is_handler("value")
    assert not is_handler(None)


def test_split_handlers_keeps_supplied_order() -> None:
    positional, handlers = split_handlers(("value", "slug", first, second))

    assert positional == ("value", "slug")
    assert handlers == (first, second)


def test_split_handlers_stops_at_first_non_handler_from_the_end() -> None:
    positional, handlers = split_handlers((first, "value", second))

    assert positional == (first, "value")
    assert handlers == (second,)


def test_split_handlers_without_handlers() -> None:
    assert split_handlers(("value",)) == (("value",), ())
    assert split_handlers(()) == ((), ())


def test_require_handlers_rejects_other_values() -> None:
    assert require_handlers((first, second)) == (first, second)

    with pytest.raises(HandlerArgumentError):
        require_handlers(("value", first))


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        ((), (False, ())),
        ((True,), (True, ())),
        ((None, first), (False, (first,))),
        ((True, first, second), (True, (first, second))),
        ((first,), (False, (first,))),
    ],
)
def test_split_construct_args(args: tuple[object, ...], expected: tuple[object, ...]) -> None:
    assert split_construct_args(args) == expected


@pytest.mark.parametrize("args", [("flag",), (True, False), (1, first)])
def test_split_construct_args_rejects_malformed_arguments(args: tuple[object, ...]) -> None:
    with pytest.raises(HandlerArgumentError):
        split_construct_args(args)
