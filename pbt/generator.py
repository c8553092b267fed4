from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Optional, Sequence, Tuple, TypeVar

from pbt.errors import Discard
from pbt.random_source import RandomSource

T = TypeVar("T")
U = TypeVar("U")

Size = int

DEFAULT_RETRIES = 100


class Generator(Generic[T]):
    def __init__(self, generator: Callable[[RandomSource, Size], T]):
        self._generator = generator

    def generate(self, source: RandomSource, size: Size) -> T:
        return self._generator(source, size)

    def map(self, func: Callable[[T], U]) -> Generator[U]:
        return map(func, self)

    def such_that(self, predicate: Callable[[T], bool], retries: int = DEFAULT_RETRIES) -> Generator[T]:
        return such_that(self, predicate, retries)

    def flat_map(self, func: Callable[[T], Generator[U]]) -> Generator[U]:
        return bind(func, self)


def sample(gen: Generator[T], count: int = 10, seed: Optional[int] = None, size: Size = 30) -> list[T]:
    source = RandomSource(seed) if seed is not None else RandomSource.from_time()
    values = []
    for _ in range(count):
        left, source = source.split()
        values.append(gen.generate(left, size))
    return values


def constant(value: T) -> Generator[T]:
    return Generator(lambda _source, _size: value)

pure = constant


def choose(low: int, high: int) -> Generator[int]:
    if low > high:
        raise ValueError(f"empty range: {low=} {high=}")
    return Generator(lambda source, _size: source.next_int(low, high))


def one_of(values: Iterable[T]) -> Generator[T]:
    all = tuple(values)
    if not all:
        raise ValueError("one_of needs at least one value")
    return Generator(lambda source, _size: source.choice(all))

elements = one_of


def map(func: Callable[[T], U], gen: Generator[T]) -> Generator[U]:
    return Generator(lambda source, size: func(gen.generate(source, size)))


def mapN(func: Callable[..., T], gens: Iterable[Generator[Any]]) -> Generator[T]:
    all = tuple(gens)
    def generator(source: RandomSource, size: Size) -> T:
        # every component gets its own stream, so the fields of a record
        # don't depend on the order they happen to be drawn in
        results = []
        for gen in all:
            left, source = source.split()
            results.append(gen.generate(left, size))
        return func(*results)
    return Generator(generator)


def bind(func: Callable[[T], Generator[U]], gen: Generator[T]) -> Generator[U]:
    # the inner generator sees the same size as the outer one - size is threaded
    # through, never re-scaled, however deep the nesting goes
    def generator(source: RandomSource, size: Size) -> U:
        outer, inner = source.split()
        return func(gen.generate(outer, size)).generate(inner, size)
    return Generator(generator)

flat_map = bind


def such_that(gen: Generator[T], predicate: Callable[[T], bool], retries: int = DEFAULT_RETRIES) -> Generator[T]:
    if retries <= 0:
        raise ValueError(f"retries must be positive: {retries=}")
    def generator(source: RandomSource, size: Size) -> T:
        for _ in range(retries):
            attempt, source = source.split()
            value = gen.generate(attempt, size)
            if predicate(value):
                return value
        raise Discard(f"no value satisfied the filter in {retries} attempts")
    return Generator(generator)


def sized(func: Callable[[Size], Generator[T]]) -> Generator[T]:
    return Generator(lambda source, size: func(size).generate(source, size))


def resize(size: Size, gen: Generator[T]) -> Generator[T]:
    return Generator(lambda source, _size: gen.generate(source, size))


def scale(func: Callable[[Size], Size], gen: Generator[T]) -> Generator[T]:
    return Generator(lambda source, size: gen.generate(source, func(size)))


def tuples(*gens: Generator[Any]) -> Generator[Tuple[Any, ...]]:
    return mapN(lambda *args: tuple(args), gens)


def list_of_length(length: int, gen: Generator[T]) -> Generator[list[T]]:
    return mapN(lambda *args: list(args), [gen] * length)


def list_of(gen: Generator[T], min_length: int = 0, max_length: Optional[int] = None) -> Generator[list[T]]:
    # without an explicit bound the length grows with size
    def length(size: Size) -> Generator[int]:
        high = max_length if max_length is not None else max(min_length, size)
        return choose(min_length, high)
    return bind(lambda l: list_of_length(l, gen), sized(length))


def choice(gens: Iterable[Generator[Any]]) -> Generator[Any]:
    all = tuple(gens)
    if not all:
        raise ValueError("choice needs at least one generator")
    which_gen = choose(0, len(all) - 1)
    return bind(lambda i: all[i], which_gen)


def frequency(weighted: Sequence[Tuple[int, Generator[Any]]]) -> Generator[Any]:
    if any(weight < 0 for weight, _ in weighted):
        raise ValueError("weights must not be negative")
    total = sum(weight for weight, _ in weighted)
    if total == 0:
        raise ValueError("frequency needs a positive total weight")
    def pick(n: int) -> Generator[Any]:
        for weight, gen in weighted:
            if n < weight:
                return gen
            n -= weight
        raise AssertionError("unreachable: n is below the total weight")
    return bind(pick, choose(0, total - 1))
