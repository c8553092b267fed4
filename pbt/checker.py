from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
import logging
import os
import time
from typing import Dict, Iterator, Mapping, Optional, Tuple

from pbt.errors import ConfigurationError
from pbt.generator import Size
from pbt.property import Property, TestResult
from pbt.random_source import RandomSource
from pbt.registry import REGISTRY, Registry
from pbt.result import Fault, Result, Status, report
from pbt.shrink import CandidateTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckConfig:
    min_successful_tests: int = 100
    # give up once discards reach this many times min_successful_tests
    max_discard_ratio: int = 10
    start_size: Size = 0
    max_size: Size = 100
    # None picks a seed from the clock; the result records the one used
    seed: Optional[int] = None
    # successful shrink steps; None for no limit
    max_shrinks: Optional[int] = 1000
    # seconds for the whole run, checked between samples and shrink steps
    deadline: Optional[float] = None
    show_original: bool = True

    def validate(self) -> None:
        if self.min_successful_tests <= 0:
            raise ConfigurationError(f"min_successful_tests must be positive, got {self.min_successful_tests}")
        if self.max_discard_ratio < 0:
            raise ConfigurationError(f"max_discard_ratio must not be negative, got {self.max_discard_ratio}")
        if self.start_size < 0:
            raise ConfigurationError(f"start_size must not be negative, got {self.start_size}")
        if self.max_size < self.start_size:
            raise ConfigurationError(f"max_size {self.max_size} is smaller than start_size {self.start_size}")
        if self.max_shrinks is not None and self.max_shrinks < 0:
            raise ConfigurationError(f"max_shrinks must not be negative, got {self.max_shrinks}")
        if self.deadline is not None and self.deadline <= 0:
            raise ConfigurationError(f"deadline must be positive, got {self.deadline}")

    def replace(self, **changes) -> CheckConfig:
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> CheckConfig:
        # lets CI replay a reported failure: PBT_SEED=1234 pytest ...
        environ = os.environ if environ is None else environ
        changes = {}
        for variable, field in (("PBT_SEED", "seed"),
                                ("PBT_TESTS", "min_successful_tests"),
                                ("PBT_MAX_SIZE", "max_size")):
            if variable in environ:
                try:
                    changes[field] = int(environ[variable])
                except ValueError:
                    raise ConfigurationError(f"{variable} must be an integer, got {environ[variable]!r}") from None
        return cls(**changes)


def _size(config: CheckConfig, successes: int, discards: int) -> Size:
    # grows linearly over the run so early tests are small and cheap;
    # a streak of discards nudges it along too
    step = successes + discards // 10
    span = config.max_size - config.start_size
    size = config.start_size + span * step // max(config.min_successful_tests - 1, 1)
    return min(size, config.max_size)


def _label_key(result: TestResult) -> Optional[str]:
    if not result.labels:
        return None
    return ", ".join(result.labels)


class _Clock:
    def __init__(self, deadline: Optional[float]) -> None:
        self._stop = None if deadline is None else time.monotonic() + deadline

    def expired(self) -> bool:
        return self._stop is not None and time.monotonic() >= self._stop


def _candidates(tree: CandidateTree[TestResult]) -> Iterator[CandidateTree[TestResult]]:
    # a shrinker that raises has no more candidates for this value; the
    # failure found so far still stands
    try:
        yield from tree.candidates
    except Exception as exc:
        logger.debug("Shrinking: shrinker raised %s at arguments %r", Fault.from_exception(exc), tree.value.arguments)


def _shrink(
    tree: CandidateTree[TestResult],
    config: CheckConfig,
    clock: _Clock,
) -> Tuple[TestResult, int, int, bool]:
    # greedy and depth first: take the first candidate that still fails and
    # start over from there, until no candidate fails
    current = tree
    shrinks, attempts = 0, 0
    while True:
        if config.max_shrinks is not None and shrinks >= config.max_shrinks:
            logger.debug("Shrinking: reached the limit of %d steps", config.max_shrinks)
            return current.value, shrinks, attempts, True
        if clock.expired():
            logger.debug("Shrinking: deadline reached after %d attempts", attempts)
            return current.value, shrinks, attempts, True
        for candidate in _candidates(current):
            attempts += 1
            if not candidate.value.is_success:
                # found a smaller value that still fails - keep shrinking
                logger.debug("Shrinking: found smaller arguments %r", candidate.value.arguments)
                current = candidate
                shrinks += 1
                break
            if clock.expired():
                logger.debug("Shrinking: deadline reached after %d attempts", attempts)
                return current.value, shrinks, attempts, True
        else:
            return current.value, shrinks, attempts, False


def check(property: Property, config: Optional[CheckConfig] = None, registry: Optional[Registry] = None) -> Result:
    """Run ``property`` against generated values and report the outcome.

    Raises :class:`ConfigurationError` before sampling if ``config`` is
    malformed. The registry is held for reading for the whole run.
    """
    config = config if config is not None else CheckConfig()
    config.validate()
    registry = registry if registry is not None else REGISTRY
    seed = config.seed if config.seed is not None else RandomSource.from_time().seed

    root = RandomSource(seed)
    clock = _Clock(config.deadline)
    histogram: Counter[str] = Counter()
    successes, discards = 0, 0

    def finish(status: Status, **fields) -> Result:
        labels = tuple(sorted(histogram.items(), key=lambda item: (-item[1], item[0])))
        result = Result(status=status, seed=seed, num_tests=successes, num_discarded=discards,
                        labels=labels, **fields)
        logger.info("Checked property with seed %d: %s after %d tests", seed, status.value, successes)
        return result

    with registry.reading():
        for test_number in range(config.min_successful_tests * (config.max_discard_ratio + 1)):
            if successes >= config.min_successful_tests:
                break
            if clock.expired():
                logger.debug("Stopping: deadline reached after %d tests", successes)
                return finish(Status.EXHAUSTED, aborted=True)

            size = _size(config, successes, discards)
            sample_source, root = root.split()
            tree = property.generate(sample_source, size, registry)
            result = tree.value

            if result.discarded:
                discards += 1
                logger.debug("Discarded test %d at size %d", test_number, size)
                if discards >= config.max_discard_ratio * config.min_successful_tests:
                    return finish(Status.EXHAUSTED)
                continue

            key = _label_key(result)
            if key is not None:
                histogram[key] += 1

            if result.is_success:
                successes += 1
                continue

            logger.debug("Fail: at test %d with arguments %r", test_number, result.arguments)
            smallest, shrinks, attempts, aborted = _shrink(tree, config, clock)
            return finish(
                Status.FALSIFIED,
                original=result.arguments,
                minimized=smallest.arguments,
                failed_at=test_number,
                failed_size=size,
                fault=smallest.fault,
                num_shrinks=shrinks,
                num_shrink_attempts=attempts,
                aborted=aborted)

    if successes < config.min_successful_tests:
        return finish(Status.EXHAUSTED)
    return finish(Status.PASSED)


def replay(
    property: Property,
    seed: int,
    index: int,
    config: Optional[CheckConfig] = None,
    registry: Optional[Registry] = None,
) -> TestResult:
    """Regenerate the sample a check with ``seed`` and ``config`` drew at test ``index``.

    The samples before ``index`` are evaluated again to recover the size
    the checker used, so the seed and test index of a reported failure are
    all it takes.
    """
    if index < 0:
        raise ValueError(f"test index must not be negative, got {index}")
    config = config if config is not None else CheckConfig()
    config.validate()
    registry = registry if registry is not None else REGISTRY

    root = RandomSource(seed)
    successes, discards = 0, 0
    with registry.reading():
        for _ in range(index + 1):
            size = _size(config, successes, discards)
            sample_source, root = root.split()
            result = property.generate(sample_source, size, registry).value
            if result.discarded:
                discards += 1
            elif result.is_success:
                successes += 1
    return result


def quick_check(property: Property, config: Optional[CheckConfig] = None, registry: Optional[Registry] = None) -> Result:
    config = config if config is not None else CheckConfig()
    result = check(property, config, registry)
    print(report(result, show_original=config.show_original))
    return result


def check_many(
    properties: Mapping[str, Property],
    config: Optional[CheckConfig] = None,
    registry: Optional[Registry] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, Result]:
    # independent runs share nothing but the read-only registry; each gets its
    # own seed split off one top-level source, so the whole batch replays
    config = config if config is not None else CheckConfig()
    config.validate()
    top = RandomSource(config.seed) if config.seed is not None else RandomSource.from_time()
    configs = {}
    for name in properties:
        own, top = top.split()
        configs[name] = config.replace(seed=own.seed)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            name: executor.submit(check, prop, configs[name], registry)
            for name, prop in properties.items()
        }
        return {name: future.result() for name, future in futures.items()}
