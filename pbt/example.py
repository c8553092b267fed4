from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class Person:
    name: str
    age: int

    def __post_init__(self):
        if self.age < 0:
            raise ValueError(f"Age must be positive")

def sort_by_age(people: list[Person]) -> list[Person]:
    return sorted(people, key=lambda p: p.age)

def wrong_sort_by_age(people: list[Person]) -> list[Person]:
    # whoops, we forgot the key
    return sorted(people)

def is_valid(persons_in: list[Person], persons_out: list[Person]) -> bool:
    same_length = len(persons_in) == len(persons_out)
    sorted = all(persons_out[i].age <= persons_out[i + 1].age
                for i in range(len(persons_out)-1))
    unchanged = { p.name for p in persons_in } == { p.name for p in persons_out }
    return same_length and sorted and unchanged


# Two immutable stacks with the same interface. Stack keeps an exact depth;
# NarrowStack keeps it in a signed 8-bit counter, the way a too-narrow C
# field would, so it silently wraps once the stack holds more than 127 items.

INT8_MIN, INT8_MAX = -128, 127


def wrap_int8(value: int) -> int:
    return (value - INT8_MIN) % 256 + INT8_MIN


class EmptyStack(Exception):
    pass


@dataclass(frozen=True)
class Stack(Generic[T]):
    items: Tuple[T, ...] = ()
    depth: int = 0

    def __len__(self) -> int:
        return self.depth

    def _grow(self, by: int) -> int:
        return self.depth + by


def push(stack: Stack[T], value: T) -> Stack[T]:
    return type(stack)(items=stack.items + (value,), depth=stack._grow(1))


def pop(stack: Stack[T]) -> Tuple[Stack[T], T]:
    if stack.depth == 0:
        raise EmptyStack("pop from an empty stack")
    *rest, top = stack.items
    return type(stack)(items=tuple(rest), depth=stack._grow(-1)), top


def push_all(stack: Stack[T], values: list[T]) -> Stack[T]:
    for value in values:
        stack = push(stack, value)
    return stack


def pop_all(stack: Stack[T], count: int) -> list[T]:
    values = []
    for _ in range(count):
        stack, value = pop(stack)
        values.append(value)
    return values


@dataclass(frozen=True)
class NarrowStack(Stack[T]):

    def _grow(self, by: int) -> int:
        return wrap_int8(self.depth + by)
