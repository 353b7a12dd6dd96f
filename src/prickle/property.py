# src/prickle/property.py
"""Properties: generators of pass/fail/discard outcomes with a message journal.

A ``Property[T]`` is a ``Gen[tuple[Journal, Outcome[T]]]``. Running it
yields an outcome plus an ordered trail of counterexample messages, and
because it is a generator, every failing outcome comes with a tree of
smaller candidate failures for the check loop to search.

Failures and discards are data. Exceptions raised by user code inside a
property's continuations are caught and turned into failures, so a buggy
predicate produces a counterexample rather than aborting the run.

Usage:
    prop = for_all(Gen.int_range(0, 100), lambda x: x < 50)
    report(prop)                          # Report(status=FAILED, ...)
    check(prop)                           # raises PropertyFailedError
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from itertools import islice
from typing import Any

from prickle.config import PropertyConfig
from prickle.errors import InvalidGeneratorError, RecheckDataError
from prickle.gen import Gen
from prickle.logging import get_logger
from prickle.report import FailureData, RecheckData, Report, ReportStatus, try_raise
from prickle.report import render as render_report
from prickle.seed import Seed
from prickle.tree import Tree

logger = get_logger(__name__)

# =============================================================================
# Outcome
# =============================================================================


@dataclass(frozen=True, slots=True)
class Success[T]:
    """The test case passed, producing ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """The test case falsified the property."""


@dataclass(frozen=True, slots=True)
class Discard:
    """The test case did not apply and counts towards neither tally."""


type Outcome[T] = Success[T] | Failure | Discard

FAILURE = Failure()
DISCARD = Discard()


def map_outcome[T, U](f: Callable[[T], U], outcome: Outcome[T]) -> Outcome[U]:
    if isinstance(outcome, Success):
        return Success(f(outcome.value))
    return outcome


def filter_outcome[T](pred: Callable[[T], bool], outcome: Outcome[T]) -> Outcome[T]:
    """Discard a success whose value fails ``pred``."""
    if isinstance(outcome, Success) and not pred(outcome.value):
        return DISCARD
    return outcome


def is_failure(outcome: Outcome[Any]) -> bool:
    return isinstance(outcome, Failure)


# =============================================================================
# Journal
# =============================================================================


@dataclass(frozen=True, slots=True)
class Journal:
    """Ordered counterexample messages, rendered only when needed.

    Entries are thunks so that values which are never reported (every
    passing test case, every discarded shrink) are never formatted.
    """

    entries: tuple[Callable[[], str], ...] = ()

    @staticmethod
    def singleton(message: str) -> Journal:
        return Journal((lambda: message,))

    @staticmethod
    def delayed(message: Callable[[], str]) -> Journal:
        return Journal((message,))

    def append(self, other: Journal) -> Journal:
        return Journal(self.entries + other.entries)

    def prepend(self, message: Callable[[], str]) -> Journal:
        return Journal((message, *self.entries))

    def eval(self) -> list[str]:
        """Render every entry; an entry that raises renders as its exception."""
        lines: list[str] = []
        for entry in self.entries:
            try:
                lines.append(entry())
            except Exception as e:
                lines.append(render_exception(e))
        return lines


EMPTY_JOURNAL = Journal()


def render_exception(e: BaseException) -> str:
    """Render a caught exception as a single counterexample message."""
    return "".join(traceback.format_exception_only(e)).strip()


# =============================================================================
# Property
# =============================================================================

type Step[T] = tuple[Journal, Outcome[T]]


class Property[T]:
    """A generator of journaled outcomes."""

    __slots__ = ("gen",)

    def __init__(self, gen: Gen[Step[T]]) -> None:
        self.gen = gen

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @staticmethod
    def of_outcome(outcome: Outcome[T]) -> Property[T]:
        return Property(Gen.constant((EMPTY_JOURNAL, outcome)))

    @staticmethod
    def success(value: T = None) -> Property[T]:  # type: ignore[assignment]
        return Property.of_outcome(Success(value))

    @staticmethod
    def failure() -> Property[None]:
        return Property.of_outcome(FAILURE)

    @staticmethod
    def discard() -> Property[None]:
        return Property.of_outcome(DISCARD)

    @staticmethod
    def of_bool(ok: bool) -> Property[None]:
        return Property.success(None) if ok else Property.failure()

    @staticmethod
    def counterexample(message: Callable[[], str] | str) -> Property[None]:
        """A passing property that journals ``message``."""
        journal = Journal.delayed(message) if callable(message) else Journal.singleton(message)
        return Property(Gen.constant((journal, Success(None))))

    @staticmethod
    def delay(f: Callable[[], Property[T]]) -> Property[T]:
        return Property(Gen.delay(lambda: f().gen))

    @staticmethod
    def using[R](resource: Callable[[], AbstractContextManager[R]], k: Callable[[R], Property[T]]) -> Property[T]:
        """Enter a fresh context manager for the duration of each run of the property."""

        def run() -> Property[T]:
            manager = resource()
            value = manager.__enter__()
            return Property.delay(lambda: k(value)).try_finally(lambda: manager.__exit__(None, None, None))

        return Property.delay(run)

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def map[U](self, f: Callable[[T], U]) -> Property[U]:
        def step(s: Step[T]) -> Step[U]:
            journal, outcome = s
            try:
                return journal, map_outcome(f, outcome)
            except Exception as e:
                return journal.append(Journal.singleton(render_exception(e))), FAILURE

        return Property(self.gen.map(step))

    def set[U](self, value: U) -> Property[U]:
        return self.map(lambda _: value)

    def bind[U](self, k: Callable[[T], Property[U]]) -> Property[U]:
        """Continue with ``k`` on success, appending its journal to this one."""

        def k_try(x: T) -> Gen[Step[U]]:
            try:
                return k(x).gen
            except Exception as e:
                return Gen.constant((Journal.singleton(render_exception(e)), FAILURE))

        def step(s: Step[T]) -> Gen[Step[U]]:
            journal, outcome = s
            if isinstance(outcome, Success):
                return k_try(outcome.value).map(lambda inner: (journal.append(inner[0]), inner[1]))
            return Gen.constant((journal, outcome))

        return Property(self.gen.bind(step))

    def where(self, pred: Callable[[T], bool]) -> Property[T]:
        """Discard test cases whose value fails ``pred``."""
        return Property(self.gen.map(lambda s: (s[0], filter_outcome(pred, s[1]))))

    filter = where

    def fail_on_false(self: Property[bool]) -> Property[None]:
        return self.bind(Property.of_bool)

    def try_finally(self, after: Callable[[], Any]) -> Property[T]:
        return Property(self.gen.try_finally(after))

    def try_with(self, handler: Callable[[Exception], Property[T]]) -> Property[T]:
        return Property(self.gen.try_with(lambda e: handler(e).gen))


# =============================================================================
# Combinators
# =============================================================================


def to_property(result: Any) -> Property[Any]:
    """Lift a predicate's return value into a property.

    ``Property`` is returned unchanged, ``bool`` becomes pass/fail, an
    ``Outcome`` is wrapped, and anything else (typically ``None`` from a
    function that asserts) counts as a pass.
    """
    if isinstance(result, Property):
        return result
    if isinstance(result, bool):
        return Property.of_bool(result)
    if isinstance(result, Success | Failure | Discard):
        return Property.of_outcome(result)
    return Property.success(result)


def for_all[A](gen: Gen[A], f: Callable[[A], Any], *, show: Callable[[A], str] = repr) -> Property[Any]:
    """Draw a value from ``gen`` and test it with ``f``.

    The drawn value is journaled ahead of anything ``f`` journals, so nested
    ``for_all`` calls report their values outermost first.
    """

    def prepend(x: A) -> Gen[Step[Any]]:
        return Property.counterexample(lambda: show(x)).set(x).bind(lambda a: to_property(f(a))).gen

    return Property(gen.bind(prepend))


def for_all_value[A](gen: Gen[A]) -> Property[A]:
    """Draw a value from ``gen`` as a successful property, journaling it."""
    return for_all(gen, Property.success)


def counterexample[T](message: Callable[[], str] | str, prop: Property[T]) -> Property[T]:
    """Prepend ``message`` to the journal of ``prop``."""
    thunk = message if callable(message) else (lambda: message)
    return Property(prop.gen.map(lambda s: (s[0].prepend(thunk), s[1])))


def all_of(props: Iterable[Property[Any]]) -> Property[None]:
    """Combine properties; the first failure or discard short-circuits."""
    acc: Property[Any] = Property.success(None)
    for p in props:
        acc = acc.bind(lambda _, p=p: p)
    return acc.set(None)


# =============================================================================
# Check Loop
# =============================================================================

_MAX_SIZE = 100


def _next_size(size: int) -> int:
    return 1 if size >= _MAX_SIZE else size + 1


def _run_tree(prop: Property[Any], seed: Seed, size: int) -> Tree[Step[Any]]:
    """Generate the outcome tree for one test case.

    A caller fault raised while generating becomes a failure with no
    shrinks. Malformed generators propagate.
    """
    try:
        return prop.gen.random.run(seed, size)
    except InvalidGeneratorError:
        raise
    except Exception as e:
        return Tree((Journal.singleton(render_exception(e)), FAILURE))


def _take_smallest(
    tree: Tree[Step[Any]],
    shrink_limit: int | None,
) -> tuple[Tree[Step[Any]], tuple[int, ...]]:
    """Greedy shrink search: repeatedly commit to the first failing child.

    Never backtracks. Stops at a node with no failing children or once
    ``shrink_limit`` steps have been taken. Returns the final node and
    the child index chosen at each step.
    """
    node = tree
    path: list[int] = []
    while shrink_limit is None or len(path) < shrink_limit:
        try:
            found = node.children.find(lambda t: is_failure(t.outcome[1]))
        except InvalidGeneratorError:
            raise
        except Exception as e:
            logger.warning("shrink_aborted", shrinks=len(path), error=render_exception(e))
            break
        if found is None:
            break
        index, node = found
        path.append(index)
    return node, tuple(path)


def report(
    prop: Property[Any],
    config: PropertyConfig | None = None,
    *,
    seed: Seed | None = None,
    size: int = 1,
) -> Report:
    """Run ``prop`` until it passes ``test_limit`` tests, fails, or gives up."""
    config = config if config is not None else PropertyConfig()
    seed = seed if seed is not None else Seed.random()
    tests = 0
    discards = 0

    while True:
        if tests >= config.test_limit:
            logger.debug("property_passed", tests=tests, discards=discards)
            return Report(tests, discards, ReportStatus.OK)

        if config.discard_limit is not None and discards >= config.discard_limit:
            logger.debug("property_gave_up", tests=tests, discards=discards)
            return Report(tests, discards, ReportStatus.GAVE_UP)

        run_seed, next_seed = seed.split()
        tree = _run_tree(prop, run_seed, size)
        outcome = tree.outcome[1]

        if isinstance(outcome, Failure):
            logger.debug("property_failed", tests=tests + 1, discards=discards, size=size)
            smallest, path = _take_smallest(tree, config.shrink_limit)
            recheck_data = RecheckData(size=size, seed=seed, shrink_path=path)
            logger.debug("shrink_complete", shrinks=len(path), recheck=recheck_data.serialize())
            failure = FailureData(
                shrinks=len(path),
                journal=smallest.outcome[0].eval(),
                recheck_data=recheck_data,
                show_recheck=config.recheck,
            )
            return Report(tests + 1, discards, ReportStatus.FAILED, failure)

        if isinstance(outcome, Discard):
            discards += 1
        else:
            tests += 1
            size = _next_size(size)
        seed = next_seed


def check(prop: Property[Any], config: PropertyConfig | None = None, *, seed: Seed | None = None) -> None:
    """Check ``prop``, raising ``PropertyFailedError`` or ``PropertyGaveUpError``."""
    try_raise(report(prop, config, seed=seed))


def render(prop: Property[Any], config: PropertyConfig | None = None, *, seed: Seed | None = None) -> str:
    return render_report(report(prop, config, seed=seed))


def report_recheck(
    prop: Property[Any],
    data: RecheckData | str,
) -> Report:
    """Replay one test case from recheck data, following its shrink path.

    The shrink search is not repeated: the node at the end of the stored
    path is the reported counterexample. A property that no longer fails
    there reports a single passing test.
    """
    if isinstance(data, str):
        data = RecheckData.deserialize(data)

    run_seed, _ = data.seed.split()
    node = _run_tree(prop, run_seed, data.size)
    for index in data.shrink_path:
        child = next(islice(node.children, index, None), None)
        if child is None:
            raise RecheckDataError(data.serialize(), f"shrink path index {index} is out of range for this property")
        node = child

    if not isinstance(node.outcome[1], Failure):
        logger.debug("recheck_passed", recheck=data.serialize())
        return Report(1, 0, ReportStatus.OK)

    failure = FailureData(
        shrinks=len(data.shrink_path),
        journal=node.outcome[0].eval(),
        recheck_data=data,
        show_recheck=False,
    )
    return Report(1, 0, ReportStatus.FAILED, failure)


def recheck(prop: Property[Any], data: RecheckData | str) -> None:
    """Replay a failure, raising ``PropertyFailedError`` if it still fails."""
    try_raise(report_recheck(prop, data))
