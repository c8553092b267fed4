from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Fault:
    # the exception is reduced to its type and message so that two runs with
    # the same seed compare equal
    type_name: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> Fault:
        return cls(type_name=type(exc).__name__, message=str(exc))

    def __str__(self) -> str:
        if not self.message:
            return self.type_name
        return f"{self.type_name}: {self.message}"


class Status(Enum):
    PASSED = "passed"
    FALSIFIED = "falsified"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Result:
    status: Status
    seed: int
    num_tests: int
    num_discarded: int
    labels: Tuple[Tuple[str, int], ...] = ()
    original: Optional[Tuple[Any, ...]] = None
    minimized: Optional[Tuple[Any, ...]] = None
    failed_at: Optional[int] = None
    failed_size: Optional[int] = None
    fault: Optional[Fault] = None
    num_shrinks: int = 0
    num_shrink_attempts: int = 0
    aborted: bool = False

    @property
    def passed(self) -> bool:
        return self.status is Status.PASSED

    @property
    def falsified(self) -> bool:
        return self.status is Status.FALSIFIED

    @property
    def exhausted(self) -> bool:
        return self.status is Status.EXHAUSTED

    @property
    def num_evaluated(self) -> int:
        # the passing samples plus the one that failed, if any
        return self.num_tests + (1 if self.status is Status.FALSIFIED else 0)

    def percentages(self) -> list[Tuple[str, float]]:
        # of all evaluated samples, so labels only some samples carry read as a share
        total = self.num_evaluated
        if total == 0:
            return []
        return [(label, 100.0 * count / total) for label, count in self.labels]


def _arguments(arguments: Tuple[Any, ...]) -> str:
    return ", ".join(repr(a) for a in arguments)


def report(result: Result, show_original: bool = True) -> str:
    lines = []
    if result.status is Status.PASSED:
        lines.append(f"Success: {result.num_tests} tests passed.")
    elif result.status is Status.EXHAUSTED:
        attempted = result.num_tests + result.num_discarded
        lines.append(
            f"Gave up: {result.num_discarded} of {attempted} samples were discarded, "
            f"only {result.num_tests} tests passed.")
        if result.aborted:
            lines.append("  stopped early: out of time.")
    else:
        lines.append(
            f"Fail: at test {result.failed_at} with arguments {_arguments(result.minimized or ())}.")
        if result.fault is not None:
            lines.append(f"  raised {result.fault}")
        shrunk = f"  shrunk {result.num_shrinks} times in {result.num_shrink_attempts} attempts"
        if result.aborted:
            shrunk += " (stopped early)"
        lines.append(shrunk + ".")
        if show_original and result.original != result.minimized:
            lines.append(f"  original arguments {_arguments(result.original or ())}.")
        lines.append(f"  reproduce with seed={result.seed}, test {result.failed_at}, size {result.failed_size}.")

    for label, percentage in result.percentages():
        lines.append(f"{percentage:5.1f}% {label}")
    return "\n".join(lines)
