from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional, Tuple, TypeVar, Union

from pbt import arbitrary as arb
from pbt.arbitrary import Arbitrary
from pbt.errors import Discard
from pbt.generator import Generator, Size
from pbt.random_source import RandomSource
from pbt.registry import Registry
from pbt.result import Fault
from pbt.shrink import CandidateTree, tree_bind, tree_constant, tree_from_shrink, tree_map

T = TypeVar("T")


@dataclass(frozen=True)
class TestResult:
    __test__ = False  # not a pytest test class

    is_success: bool
    arguments: Tuple[Any, ...]
    labels: Tuple[str, ...] = ()
    fault: Optional[Fault] = None
    discarded: bool = False


_DISCARDED = TestResult(is_success=True, arguments=(), discarded=True)


class Property:
    def __init__(self,
        generator: Callable[[RandomSource, Size, Registry], CandidateTree[TestResult]]):
        self._generator = generator

    def generate(self, source: RandomSource, size: Size, registry: Registry) -> CandidateTree[TestResult]:
        return self._generator(source, size, registry)


# What a predicate may return: a bool, a nested property (for dependent and
# multi-argument properties), or None for assert-style predicates.
Outcome = Union[Property, bool, None]

ArgumentLike = Union[Arbitrary[Any], Generator[Any], Any]


def _resolve(argument: ArgumentLike, registry: Registry) -> Arbitrary[Any]:
    if isinstance(argument, (Arbitrary, Generator)):
        return arb.as_arbitrary(argument)
    return registry.lookup(argument)


def _as_tree(outcome: Outcome, source: RandomSource, size: Size, registry: Registry) -> CandidateTree[TestResult]:
    if isinstance(outcome, Property):
        return outcome.generate(source, size, registry)
    if outcome is None or isinstance(outcome, bool):
        return tree_constant(TestResult(is_success=outcome is not False, arguments=()))
    raise TypeError(f"a property must return a bool or a Property, not {type(outcome).__name__}")


def _for_all(
    resolve: Callable[[Registry], Arbitrary[T]],
    predicate: Callable[[T], Outcome],
    labeler: Optional[Callable[[T], str]],
    arguments_of: Callable[[T], Tuple[Any, ...]],
) -> Property:
    def generator(source: RandomSource, size: Size, registry: Registry) -> CandidateTree[TestResult]:
        arbitrary = resolve(registry)
        value_source, inner_source = source.split()
        inner_seed = inner_source.seed
        try:
            value = arbitrary.generator.generate(value_source, size)
        except Discard:
            return tree_constant(_DISCARDED)
        except Exception as exc:
            return tree_constant(TestResult(is_success=False, arguments=(), fault=Fault.from_exception(exc)))

        def run(value: T) -> CandidateTree[TestResult]:
            arguments = arguments_of(value)
            try:
                labels = (labeler(value),) if labeler is not None else ()
                # every shrink candidate gets a fresh copy of the same inner stream,
                # so nested generators draw the same way while the outer value shrinks
                tree = _as_tree(predicate(value), RandomSource(inner_seed), size, registry)
            except Discard:
                return tree_constant(_DISCARDED)
            except Exception as exc:
                return tree_constant(TestResult(
                    is_success=False, arguments=arguments, fault=Fault.from_exception(exc)))
            return tree_map(
                lambda inner: replace(inner,
                    arguments=arguments + inner.arguments,
                    labels=labels + inner.labels),
                tree)

        return tree_bind(run, tree_from_shrink(value, arbitrary.shrink))
    return Property(generator)


def for_all(
    arbitrary: ArgumentLike,
    property: Callable[[T], Outcome],
    labeler: Optional[Callable[[T], str]] = None,
) -> Property:
    """Claim that ``property`` holds for every value ``arbitrary`` produces.

    ``arbitrary`` is an :class:`Arbitrary`, a bare :class:`Generator` (whose
    values then aren't shrunk) or a type looked up in the checker's registry.
    ``property`` may return another ``for_all`` to quantify over more values,
    and those inner generators may depend on the outer value.
    """
    return _for_all(
        lambda registry: _resolve(arbitrary, registry),
        property, labeler, lambda value: (value,))


def for_allN(
    arbitraries: Iterable[ArgumentLike],
    property: Callable[..., Outcome],
    labeler: Optional[Callable[..., str]] = None,
) -> Property:
    all = tuple(arbitraries)
    return _for_all(
        lambda registry: arb.tuples(*(_resolve(a, registry) for a in all)),
        lambda values: property(*values),
        (lambda values: labeler(*values)) if labeler is not None else None,
        tuple)


def _with_labels(labels: Tuple[str, ...], outcome: Outcome) -> Property:
    def generator(source: RandomSource, size: Size, registry: Registry) -> CandidateTree[TestResult]:
        return tree_map(
            lambda result: replace(result, labels=labels + result.labels),
            _as_tree(outcome, source, size, registry))
    return Property(generator)


def collect(value: Any, outcome: Outcome = True) -> Property:
    return _with_labels((str(value),), outcome)


def label(text: str, outcome: Outcome = True) -> Property:
    return _with_labels((text,), outcome)


def classify(condition: bool, text: str, outcome: Outcome = True) -> Property:
    return _with_labels((text,) if condition else (), outcome)


def assume(condition: bool) -> None:
    if not condition:
        raise Discard("assumption not met")


def implies(condition: bool, outcome: Outcome) -> Outcome:
    assume(condition)
    return outcome
