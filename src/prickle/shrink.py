# src/prickle/shrink.py
"""Shrink candidate functions.

Each function maps a value to a lazy sequence of smaller candidates,
most aggressive first. They are pure: the same input always re-derives
the same candidates.

    >>> shrink.towards(0, 100).to_list()
    [0, 50, 75, 88, 94, 97, 99]
    >>> shrink.removes(2, [1, 2, 3, 4, 5, 6]).to_list()
    [[3, 4, 5, 6], [1, 2, 5, 6], [1, 2, 3, 4]]
    >>> shrink.list_([1, 2, 3]).to_list()
    [[], [2, 3], [1, 3], [1, 2]]
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence

from prickle.lazy import LazySeq
from prickle.numeric import quot
from prickle.tree import Tree

# =============================================================================
# Numbers
# =============================================================================


def halves(n: int) -> LazySeq[int]:
    """Progressive halving towards zero, excluding zero.

    ``halves(15) == [15, 7, 3, 1]``, ``halves(-26) == [-26, -13, -6, -3, -1]``.
    """

    def go() -> Iterator[int]:
        x = n
        while x != 0:
            yield x
            x = quot(x, 2)

    return LazySeq(go)


def towards(destination: int, x: int) -> LazySeq[int]:
    """Shrink an integer by edging towards a destination.

    Both operands are halved before subtracting so the difference stays
    within the bounds of a fixed-width type even at its extremes.
    """
    if destination == x:
        return LazySeq.empty()

    diff = quot(x, 2) - quot(destination, 2)
    return halves(diff).map(lambda h: x - h).cons_nub(destination)


def towards_double(destination: float, x: float) -> LazySeq[float]:
    """Shrink a float by edging towards a destination.

    Stops once the step is too small to change ``x``.
    """
    if destination == x:
        return LazySeq.empty()

    def go() -> Iterator[float]:
        step = x - destination
        while True:
            candidate = x - step
            if candidate == x:
                return
            yield candidate
            step /= 2.0

    return LazySeq(go)


def double(x: float) -> LazySeq[float]:
    """Shrink a float: try its positive counterpart, then shrink its integral part."""
    positive: LazySeq[float] = LazySeq.singleton(-x) if x < 0.0 else LazySeq.empty()
    integrals = towards(0, int(x)).map(float)
    return positive.append(integrals)


# =============================================================================
# Lists
# =============================================================================


def removes[T](k: int, xs: Sequence[T]) -> LazySeq[list[T]]:
    """Every way of removing one run of ``k`` consecutive elements, left to right.

    Runs are aligned to multiples of ``k``; a trailing run shorter than
    ``k`` is never removed.
    """
    items = list(xs)

    def go() -> Iterator[list[T]]:
        if k <= 0:
            return
        n = len(items)
        start = 0
        while k <= n - start:
            yield items[:start] + items[start + k :]
            start += k

    return LazySeq(go)


def list_[T](xs: Sequence[T]) -> LazySeq[list[T]]:
    """Shrink a list by edging towards the empty list.

    The empty list is always tried first since it is the optimal shrink.
    """
    items = list(xs)
    return halves(len(items)).concat_map(lambda k: removes(k, items))


def elems[T](shrink: Callable[[T], Iterable[T]], xs: Sequence[T]) -> LazySeq[list[T]]:
    """Shrink exactly one element at a time, leftmost first."""
    items = list(xs)

    def go() -> Iterator[list[T]]:
        for i, x in enumerate(items):
            for y in shrink(x):
                yield [*items[:i], y, *items[i + 1 :]]

    return LazySeq(go)


# =============================================================================
# Sequencing Trees
# =============================================================================


def sequence[T](merge: Callable[[list[Tree[T]]], Iterable[list[Tree[T]]]], trees: Sequence[Tree[T]]) -> Tree[list[T]]:
    """Turn a list of trees into a tree of lists, using ``merge`` for shrink options."""
    forest = list(trees)
    outcome = [t.outcome for t in forest]
    children = LazySeq(lambda: merge(forest)).map(lambda ts: sequence(merge, ts))
    return Tree(outcome, children)


def _children[T](tree: Tree[T]) -> LazySeq[Tree[T]]:
    return tree.children


def sequence_list[T](trees: Sequence[Tree[T]]) -> Tree[list[T]]:
    """Sequence trees, shrinking both the list length and its elements."""
    return sequence(lambda ts: list_(ts).append(elems(_children, ts)), trees)


def sequence_elems[T](trees: Sequence[Tree[T]]) -> Tree[list[T]]:
    """Sequence trees, shrinking only the elements; the length never changes."""
    return sequence(lambda ts: elems(_children, ts), trees)
