from __future__ import annotations

from copy import copy
import dataclasses
import itertools
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, Protocol, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Shrink(Protocol[T]):
    def __call__(self, value: T) -> Iterable[T]:
        ...


# Every shrinker below yields candidates that are strictly smaller than the value
# under some well-founded measure (distance to a target, length, ...), so any
# chain of shrinks ends. Candidates are produced lazily: the search usually
# only needs the first few.

def shrink_nothing(value: Any) -> Iterable[Any]:
    return iter(())


def shrink_towards(target: int) -> Shrink[int]:
    # target first - the biggest step - then halfway, a quarter of the way, ...
    # and finally the immediate neighbour of value on the target's side
    def shrinker(value: int) -> Iterable[int]:
        if value == target:
            return
        yield target
        if target == 0 and value < 0:
            yield -value
        distance = abs(value - target)
        direction = 1 if value > target else -1
        step = distance // 2
        while step != 0:
            yield value - direction * step
            step = step // 2
    return shrinker


shrink_int = shrink_towards(0)


def shrink_int_between(low: int, high: int) -> Shrink[int]:
    target = 0
    if low > 0:
        target = low
    if high < 0:
        target = high
    return shrink_filter(lambda v: low <= v <= high, shrink_towards(target))


def shrink_bool(value: bool) -> Iterable[bool]:
    if value:
        yield False


# characters move towards 'a' by code point, so 'z' tries 'a' then 'n', 't', ...
_shrink_code_point = shrink_towards(ord('a'))

def shrink_char(value: str) -> Iterable[str]:
    for code_point in _shrink_code_point(ord(value)):
        yield chr(code_point)


def shrink_list(shrink_element: Shrink[T]) -> Shrink[list[T]]:
    def shrinker(value: list[T]) -> Iterable[list[T]]:
        length = len(value)
        if length == 0:
            return
        yield []
        # drop contiguous chunks, halves first, down to single elements
        chunk = length // 2
        while chunk != 0:
            for start in range(0, length - chunk + 1, chunk):
                yield value[:start] + value[start + chunk:]
            chunk = chunk // 2
        for i, elem in enumerate(value):
            for smaller_elem in shrink_element(elem):
                smaller_list = list(value)
                smaller_list[i] = smaller_elem
                yield smaller_list
    return shrinker


def shrink_str(shrink_character: Shrink[str] = shrink_char) -> Shrink[str]:
    shrink_chars = shrink_list(shrink_character)
    def shrinker(value: str) -> Iterable[str]:
        for smaller_list in shrink_chars(list(value)):
            yield "".join(smaller_list)
    return shrinker


def shrink_tuple(*shrinks: Shrink[Any]) -> Shrink[Tuple[Any, ...]]:
    def shrinker(value: Tuple[Any, ...]) -> Iterable[Tuple[Any, ...]]:
        for i, shrink in enumerate(shrinks):
            for candidate in shrink(value[i]):
                yield value[:i] + (candidate,) + value[i + 1:]
    return shrinker


# The shrinkers below run user code (constructors, predicates, mapping
# functions) on each candidate. A candidate that makes it raise is one the
# user can't build, so it is skipped like a candidate a filter rejects.

def shrink_record(**field_shrinks: Shrink[Any]) -> Shrink[Any]:
    # one field at a time, the others keep their current value
    def shrinker(value: Any) -> Iterable[Any]:
        for name, shrink in field_shrinks.items():
            for candidate in shrink(getattr(value, name)):
                try:
                    record = dataclasses.replace(value, **{name: candidate})
                except Exception:
                    continue
                yield record
    return shrinker


def shrink_optional(shrink: Shrink[T]) -> Shrink[Optional[T]]:
    def shrinker(value: Optional[T]) -> Iterable[Optional[T]]:
        if value is None:
            return
        yield None
        yield from shrink(value)
    return shrinker


def shrink_filter(predicate: Callable[[T], bool], shrink: Shrink[T]) -> Shrink[T]:
    def shrinker(value: T) -> Iterable[T]:
        for candidate in shrink(value):
            try:
                keep = predicate(candidate)
            except Exception:
                continue
            if keep:
                yield candidate
    return shrinker


def shrink_map(func: Callable[[T], U], back: Callable[[U], T], shrink: Shrink[T]) -> Shrink[U]:
    def shrinker(value: U) -> Iterable[U]:
        try:
            original = back(value)
        except Exception:
            return
        for candidate in shrink(original):
            try:
                mapped = func(candidate)
            except Exception:
                continue
            yield mapped
    return shrinker


class CandidateTree(Generic[T]):

    def __init__(self, value: T, candidates: Iterable[CandidateTree[T]]) -> None:
        self._value = value
        # tee'ing once lets every reader get a fresh copy of the candidates,
        # while each candidate is still only computed once
        (self._candidates,) = itertools.tee(candidates, 1)

    @property
    def value(self) -> T:
        return self._value

    @property
    def candidates(self) -> Iterator[CandidateTree[T]]:
        return copy(self._candidates)


def tree_constant(value: T) -> CandidateTree[T]:
    return CandidateTree(value, tuple())


def tree_from_shrink(value: T, shrink: Shrink[T]) -> CandidateTree[T]:
    return CandidateTree(
        value = value,
        candidates = (
            tree_from_shrink(v, shrink)
            for v in shrink(value)
        )
    )


def tree_map(f: Callable[[T], U], tree: CandidateTree[T]) -> CandidateTree[U]:
    value = f(tree.value)
    candidates = (tree_map(f, candidate) for candidate in tree.candidates)
    return CandidateTree(
        value = value,
        candidates = candidates
    )


def tree_bind(
    f: Callable[[T], CandidateTree[U]],
    tree: CandidateTree[T]
) -> CandidateTree[U]:

    # shrink the outer value first: a smaller outer value usually makes the
    # inner one smaller too, and it cuts the number of shrink steps
    tree_u = f(tree.value)
    candidates = (
        tree_bind(f, candidate)
        for candidate in tree.candidates
    )

    return CandidateTree(
        value = tree_u.value,
        candidates = itertools.chain(
            candidates,
            tree_u.candidates
        )
    )
