from dataclasses import dataclass
from types import GenericAlias
from typing import TypeVar

import pytest

from unions import ADT


T = TypeVar("T")


class Option(ADT[T]):
    NONE = None

    @dataclass
    class Some:
        val: T

    def is_some(self) -> bool:
        return self is not Option.NONE

    def unwrap(self) -> T:
        if self is Option.NONE:
            raise RuntimeError("Value not present")
        return self.val

    def __iter__(self):
        return iter([] if self is Option.NONE else [self.val])


def test_generic_alias():
    assert isinstance(Option[int], GenericAlias)
    assert Option[int].NONE is Option.NONE


def test_iteration():
    assert list(Option[int].NONE) == []
    assert list(Option[int].Some(1)) == [1]


def test_methods():
    assert Option.Some(1).unwrap() == 1
    assert Option.Some(1).is_some()
    assert not Option.NONE.is_some()

    with pytest.raises(RuntimeError):
        Option.NONE.unwrap()


def test_lookup_by_none():
    assert Option(None) is Option.NONE


def test_exhaustive_match():
    def double(option: Option[int]) -> int:
        return Option.match(option, NONE=lambda: 0, Some=lambda val: val * 2)

    assert double(Option.Some(2)) == 4
    assert double(Option.NONE) == 0
