from dataclasses import dataclass
from typing import Optional

import pytest

from pbt import arbitrary as arb
from pbt.errors import RegistryError, UnknownTypeError
from pbt.example import Person
from pbt.generator import constant
from pbt.random_source import RandomSource
from pbt.registry import REGISTRY, Registry, default_registry


def generate(registry, tp, seed=3, size=10):
    return registry.lookup(tp).generator.generate(RandomSource(seed), size)


@dataclass(frozen=True)
class Point:
    x: int
    y: int
    visible: bool


def test_builtin_entries(registry):
    assert isinstance(generate(registry, int), int)
    assert isinstance(generate(registry, bool), bool)
    assert isinstance(generate(registry, str), str)


def test_generic_types_are_built_from_their_parts(registry):
    assert all(isinstance(v, int) for v in generate(registry, list[int]))
    pair = generate(registry, tuple[int, str])
    assert isinstance(pair, tuple) and isinstance(pair[0], int) and isinstance(pair[1], str)
    many = generate(registry, tuple[bool, ...])
    assert isinstance(many, tuple) and all(isinstance(v, bool) for v in many)
    assert list(registry.lookup(Optional[int]).shrink(4))[0] is None


def test_dataclasses_are_built_from_their_fields(registry):
    point = generate(registry, Point)
    assert isinstance(point, Point) and isinstance(point.visible, bool)


def test_unknown_types_raise(registry):
    with pytest.raises(UnknownTypeError):
        registry.lookup(float)
    with pytest.raises(LookupError):
        registry.lookup(list[float])
    assert float not in registry
    assert list[int] in registry


def test_register_shadows_and_feeds_compound_types(registry):
    registry.register(int, arb.Arbitrary(constant(7)))
    assert generate(registry, int) == 7
    assert set(generate(registry, list[int], size=20)) <= {7}


def test_persons_need_a_non_negative_age(registry):
    # the default int arbitrary can produce negative ages, Person refuses them
    registry.register(Person, arb.records(Person, name=arb.text(), age=arb.integers(0, 100)))
    persons = generate(registry, list[Person], size=20)
    assert all(isinstance(p, Person) and 0 <= p.age <= 100 for p in persons)


def test_register_while_reading_is_refused(registry):
    with registry.reading():
        with pytest.raises(RegistryError):
            registry.register(int, arb.integers(0, 1))
    registry.register(int, arb.integers(0, 1))
    assert generate(registry, int) in (0, 1)


def test_copies_are_isolated(registry):
    copied = registry.copy()
    copied.register(int, arb.Arbitrary(constant(1)))
    assert generate(copied, int) == 1
    assert generate(registry, int, size=0) == 0


def test_default_registries_are_fresh():
    assert default_registry() is not default_registry()
    assert isinstance(REGISTRY, Registry)
    assert int in REGISTRY
