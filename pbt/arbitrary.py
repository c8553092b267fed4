from __future__ import annotations

import dataclasses
from dataclasses import dataclass
import string
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar, Union

from pbt import generator as gen
from pbt.generator import DEFAULT_RETRIES, Generator, Size
from pbt.random_source import RandomSource
from pbt.shrink import (Shrink, shrink_bool, shrink_filter, shrink_list, shrink_map,
                        shrink_nothing, shrink_optional, shrink_record, shrink_str, shrink_towards,
                        shrink_tuple)

T = TypeVar("T")
U = TypeVar("U")

# One in this many bounded integers is drawn from the boundary values instead of
# the whole range - off-by-one and overflow bugs live at the edges.
BOUNDARY_ODDS = 8

DEFAULT_ALPHABET = string.ascii_letters + string.digits + " "


@dataclass(frozen=True)
class Arbitrary(Generic[T]):
    generator: Generator[T]
    shrink: Shrink[T] = shrink_nothing

    def map(self, func: Callable[[T], U], back: Optional[Callable[[U], T]] = None) -> Arbitrary[U]:
        # without a way back to T, mapped values can't be shrunk
        if back is None:
            return Arbitrary(gen.map(func, self.generator))
        return Arbitrary(gen.map(func, self.generator), shrink_map(func, back, self.shrink))

    def such_that(self, predicate: Callable[[T], bool], retries: int = DEFAULT_RETRIES) -> Arbitrary[T]:
        return Arbitrary(
            gen.such_that(self.generator, predicate, retries),
            shrink_filter(predicate, self.shrink))

    def with_shrink(self, shrink: Shrink[T]) -> Arbitrary[T]:
        return dataclasses.replace(self, shrink=shrink)


def as_arbitrary(value: Union[Arbitrary[T], Generator[T]]) -> Arbitrary[T]:
    if isinstance(value, Arbitrary):
        return value
    if isinstance(value, Generator):
        return Arbitrary(value)
    raise TypeError(f"expected an Arbitrary or a Generator, got {value!r}")


def _boundaries(low: int, high: int) -> tuple[int, ...]:
    candidates = {low, high, low + 1, high - 1, 0}
    return tuple(sorted(v for v in candidates if low <= v <= high))


def integers(low: Optional[int] = None, high: Optional[int] = None) -> Arbitrary[int]:
    if low is not None and high is not None and low > high:
        raise ValueError(f"empty range: {low=} {high=}")

    target = 0
    if low is not None and low > 0:
        target = low
    if high is not None and high < 0:
        target = high

    def in_range(value: int) -> bool:
        return (low is None or low <= value) and (high is None or value <= high)

    shrink = shrink_filter(in_range, shrink_towards(target))

    if low is not None and high is not None:
        boundaries = _boundaries(low, high)
        def bounded(source: RandomSource, _size: Size) -> int:
            if source.next_int(0, BOUNDARY_ODDS - 1) == 0:
                return source.choice(boundaries)
            return source.next_int(low, high)
        return Arbitrary(Generator(bounded), shrink)

    # open ends grow with size, away from the shrink target
    def unbounded(source: RandomSource, size: Size) -> int:
        lo = low if low is not None else target - size
        hi = high if high is not None else target + size
        return source.next_int(lo, hi)
    return Arbitrary(Generator(unbounded), shrink)


def booleans() -> Arbitrary[bool]:
    return Arbitrary(gen.one_of((False, True)), shrink_bool)


def characters(alphabet: str = DEFAULT_ALPHABET) -> Arbitrary[str]:
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    # towards the front of the alphabet
    return Arbitrary(
        gen.one_of(alphabet),
        shrink_map(lambda i: alphabet[i], alphabet.index, shrink_towards(0)))


def lists(element: Arbitrary[T], min_length: int = 0, max_length: Optional[int] = None) -> Arbitrary[list[T]]:
    def long_enough(value: list[T]) -> bool:
        return len(value) >= min_length
    return Arbitrary(
        gen.list_of(element.generator, min_length, max_length),
        shrink_filter(long_enough, shrink_list(element.shrink)))


def text(alphabet: str = DEFAULT_ALPHABET, min_length: int = 0, max_length: Optional[int] = None) -> Arbitrary[str]:
    chars = characters(alphabet)
    def long_enough(value: str) -> bool:
        return len(value) >= min_length
    return Arbitrary(
        gen.map("".join, gen.list_of(chars.generator, min_length, max_length)),
        shrink_filter(long_enough, shrink_str(chars.shrink)))


def tuples(*elements: Arbitrary[Any]) -> Arbitrary[tuple[Any, ...]]:
    return Arbitrary(
        gen.tuples(*(e.generator for e in elements)),
        shrink_tuple(*(e.shrink for e in elements)))


def records(cls: Callable[..., T], **fields: Arbitrary[Any]) -> Arbitrary[T]:
    names = tuple(fields)
    def build(*values: Any) -> T:
        return cls(**dict(zip(names, values)))
    return Arbitrary(
        gen.mapN(build, (fields[name].generator for name in names)),
        shrink_record(**{name: fields[name].shrink for name in names}))


def optionals(element: Arbitrary[T]) -> Arbitrary[Optional[T]]:
    return Arbitrary(
        gen.frequency([(1, gen.constant(None)), (4, element.generator)]),
        shrink_optional(element.shrink))


def sampled_from(values: Iterable[T]) -> Arbitrary[T]:
    # earlier values count as smaller
    all: Sequence[T] = tuple(values)
    if not all:
        raise ValueError("sampled_from needs at least one value")
    return Arbitrary(
        gen.one_of(all),
        shrink_map(lambda i: all[i], all.index, shrink_towards(0)))
