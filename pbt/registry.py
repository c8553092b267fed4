from __future__ import annotations

from contextlib import contextmanager
import dataclasses
import logging
import threading
import types
import typing
from typing import Any, Dict, Iterator, Optional, Union

from pbt import arbitrary as arb
from pbt.arbitrary import Arbitrary
from pbt.errors import RegistryError, UnknownTypeError

logger = logging.getLogger(__name__)


class Registry:
    """Maps types to their default :class:`Arbitrary`.

    Entries are resolved lazily: ``list[int]``, ``tuple[int, str]``,
    ``Optional[bool]`` and dataclasses are built from the entries of their
    parts, so registering a custom ``int`` changes every list of ints too.

    A checker holds the registry for reading while it runs; registering
    during that time raises :class:`RegistryError`.
    """

    def __init__(self, entries: Optional[Dict[Any, Arbitrary[Any]]] = None) -> None:
        self._entries: Dict[Any, Arbitrary[Any]] = dict(entries or {})
        self._lock = threading.Lock()
        self._readers = 0

    def register(self, tp: Any, arbitrary: Arbitrary[Any]) -> None:
        with self._lock:
            if self._readers:
                raise RegistryError(f"cannot register {tp!r} while {self._readers} check(s) are running")
            if tp in self._entries:
                logger.debug("Shadowing registry entry for %r", tp)
            self._entries[tp] = arbitrary

    def __contains__(self, tp: Any) -> bool:
        try:
            self.lookup(tp)
        except UnknownTypeError:
            return False
        return True

    def copy(self) -> Registry:
        with self._lock:
            return Registry(self._entries)

    @contextmanager
    def reading(self) -> Iterator[Registry]:
        with self._lock:
            self._readers += 1
        try:
            yield self
        finally:
            with self._lock:
                self._readers -= 1

    def lookup(self, tp: Any) -> Arbitrary[Any]:
        if tp in self._entries:
            return self._entries[tp]

        origin = typing.get_origin(tp)
        args = typing.get_args(tp)
        if origin is list and len(args) == 1:
            return arb.lists(self.lookup(args[0]))
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                element = self.lookup(args[0])
                return arb.lists(element).map(tuple, list)
            return arb.tuples(*(self.lookup(a) for a in args))
        if origin in (Union, getattr(types, "UnionType", Union)):
            others = [a for a in args if a is not type(None)]
            if len(others) == 1 and len(args) == 2:
                return arb.optionals(self.lookup(others[0]))
        if dataclasses.is_dataclass(tp) and isinstance(tp, type):
            hints = typing.get_type_hints(tp)
            fields = {
                f.name: self.lookup(hints[f.name])
                for f in dataclasses.fields(tp) if f.init
            }
            return arb.records(tp, **fields)

        raise UnknownTypeError(f"no arbitrary registered for {tp!r}")


def default_registry() -> Registry:
    return Registry({
        int: arb.integers(),
        bool: arb.booleans(),
        str: arb.text(),
    })


REGISTRY = default_registry()


def register(tp: Any, arbitrary: Arbitrary[Any]) -> None:
    REGISTRY.register(tp, arbitrary)
