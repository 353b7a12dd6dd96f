# src/prickle/lazy.py
"""Re-derivable lazy sequences.

Shrink spaces can be enormous or infinite, so tree children and shrink
candidates are never materialized up front. A ``LazySeq`` holds a thunk
that produces a fresh iterator each time the sequence is iterated. Nothing
is memoized: the same pure inputs re-derive the same elements on demand.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator


class LazySeq[T]:
    """A lazily evaluated sequence that can be iterated any number of times."""

    __slots__ = ("_thunk",)

    def __init__(self, thunk: Callable[[], Iterable[T]]) -> None:
        self._thunk = thunk

    def __iter__(self) -> Iterator[T]:
        return iter(self._thunk())

    def __repr__(self) -> str:
        return "LazySeq(...)"

    @classmethod
    def empty(cls) -> LazySeq[T]:
        return cls(tuple)

    @classmethod
    def singleton(cls, x: T) -> LazySeq[T]:
        return cls(lambda: (x,))

    @classmethod
    def of(cls, xs: Iterable[T]) -> LazySeq[T]:
        """Wrap an iterable, freezing it so it can be re-iterated."""
        items = tuple(xs)
        return cls(lambda: items)

    def to_list(self) -> list[T]:
        return list(self)

    def take(self, n: int) -> list[T]:
        return list(itertools.islice(self, n))

    def map[U](self, f: Callable[[T], U]) -> LazySeq[U]:
        return LazySeq(lambda: map(f, self))

    def filter(self, pred: Callable[[T], bool]) -> LazySeq[T]:
        return LazySeq(lambda: filter(pred, self))

    def append(self, other: LazySeq[T]) -> LazySeq[T]:
        return LazySeq(lambda: itertools.chain(self, other))

    def concat_map[U](self, f: Callable[[T], Iterable[U]]) -> LazySeq[U]:
        return LazySeq(lambda: itertools.chain.from_iterable(map(f, self)))

    def cons_nub(self, x: T) -> LazySeq[T]:
        """Prepend ``x`` unless it equals the current first element."""

        def go() -> Iterator[T]:
            it = iter(self)
            first = next(it, _MISSING)
            if first is _MISSING:
                yield x
                return
            if x != first:
                yield x
            yield first  # type: ignore[misc]
            yield from it

        return LazySeq(go)

    def find(self, pred: Callable[[T], bool]) -> tuple[int, T] | None:
        """Return the index and value of the first element satisfying ``pred``."""
        for i, x in enumerate(self):
            if pred(x):
                return i, x
        return None


_MISSING = object()
