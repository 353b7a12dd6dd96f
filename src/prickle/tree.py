# src/prickle/tree.py
"""Lazy rose trees of generated outcomes and their shrinks.

A ``Tree`` holds a generated outcome and all the ways it can be made
smaller. Children are ordered most aggressive shrink first: the shrink
search commits to the first failing child and never backtracks to try a
sibling, so ordering decides the quality of the counterexample.

Children live in a ``LazySeq`` and are derived on demand from the same
pure inputs, so infinite shrink spaces cost nothing until explored.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

from prickle.lazy import LazySeq


class Tree[T]:
    """A generated outcome paired with its ordered, lazy shrinks."""

    __slots__ = ("children", "outcome")

    def __init__(self, outcome: T, children: LazySeq[Tree[T]] | None = None) -> None:
        self.outcome = outcome
        self.children: LazySeq[Tree[T]] = children if children is not None else LazySeq.empty()

    def __repr__(self) -> str:
        return f"Tree({self.outcome!r}, ...)"

    def __iter__(self) -> Iterator[T]:
        """Iterate outcomes in pre-order. May not terminate for infinite trees."""
        yield self.outcome
        for child in self.children:
            yield from child

    @staticmethod
    def singleton(x: T) -> Tree[T]:
        """A tree with a single outcome and no shrinks."""
        return Tree(x)

    @property
    def shrinks(self) -> LazySeq[T]:
        """Outcomes of the immediate children."""
        return self.children.map(lambda t: t.outcome)

    # -------------------------------------------------------------------------
    # Functor / Monad
    # -------------------------------------------------------------------------

    def map[U](self, f: Callable[[T], U]) -> Tree[U]:
        children = self.children
        return Tree(f(self.outcome), children.map(lambda t: t.map(f)))

    def bind[U](self, k: Callable[[T], Tree[U]]) -> Tree[U]:
        """Monadic bind.

        Shrinks of this (outer) tree come first, each re-bound through
        ``k``, followed by the shrinks of the tree ``k`` produced.
        """
        inner = k(self.outcome)
        outer = self.children.map(lambda t: t.bind(k))
        return Tree(inner.outcome, outer.append(inner.children))

    @staticmethod
    def join(trees: Tree[Tree[T]]) -> Tree[T]:
        return trees.bind(lambda t: t)

    def duplicate(self) -> Tree[Tree[T]]:
        return Tree(self, self.children.map(lambda t: t.duplicate()))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @staticmethod
    def unfold[B](f: Callable[[B], T], g: Callable[[B], Iterable[B]], x: B) -> Tree[T]:
        """Build a tree from a seed value, an outcome projection and a child generator."""
        return Tree(f(x), Tree.unfold_forest(f, g, x))

    @staticmethod
    def unfold_forest[B](f: Callable[[B], T], g: Callable[[B], Iterable[B]], x: B) -> LazySeq[Tree[T]]:
        return LazySeq(lambda: (Tree.unfold(f, g, y) for y in g(x)))

    def expand(self, f: Callable[[T], Iterable[T]]) -> Tree[T]:
        """Add shrinks computed from each node's outcome after its existing children.

        Applies recursively. The root outcome is untouched and existing
        children keep their order. Placing the new shrinks first would
        cull faster but loses minimal shrinking.
        """
        existing = self.children.map(lambda t: t.expand(f))
        extra = Tree.unfold_forest(_identity, f, self.outcome)
        return Tree(self.outcome, existing.append(extra))

    def filter(self, pred: Callable[[T], bool]) -> Tree[T]:
        """Recursively drop subtrees whose outcome fails ``pred``.

        The root is never dropped.
        """
        return Tree(self.outcome, self.filter_forest(pred, self.children))

    @staticmethod
    def filter_forest(pred: Callable[[T], bool], trees: LazySeq[Tree[T]]) -> LazySeq[Tree[T]]:
        return trees.filter(lambda t: pred(t.outcome)).map(lambda t: t.filter(pred))

    # -------------------------------------------------------------------------
    # Folds
    # -------------------------------------------------------------------------

    def fold[X, R](self, f: Callable[[T, X], R], g: Callable[[LazySeq[R]], X]) -> R:
        return f(self.outcome, g(self.children.map(lambda t: t.fold(f, g))))

    def depth(self) -> int:
        """Height of the tree; a singleton has depth 0. Forces the whole tree."""
        return self.fold(lambda _x, child_depths: child_depths, lambda ds: 1 + max(ds, default=-1))

    def to_list(self) -> list[T]:
        """All outcomes in pre-order. Forces the whole tree."""
        return list(self)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_lines(self, show: Callable[[T], str] = repr, max_children: int | None = None) -> list[str]:
        children = self.children.to_list() if max_children is None else self.children.take(max_children)
        lines = [show(self.outcome)]
        for i, child in enumerate(children):
            last = i == len(children) - 1
            head, rest = ("└-", "  ") if last else ("├-", "| ")
            child_lines = child.render_lines(show, max_children)
            lines.append(head + child_lines[0])
            lines.extend(rest + line for line in child_lines[1:])
        return lines

    def render(self, show: Callable[[T], str] = repr, max_children: int | None = None) -> str:
        """Render the tree as indented ASCII art. Forces the rendered part."""
        return "\n".join(self.render_lines(show, max_children))


def _identity(x: Any) -> Any:
    return x
