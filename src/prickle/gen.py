# src/prickle/gen.py
"""Generators with integrated shrinking.

A ``Gen[T]`` is a ``Random[Tree[T]]``: a single draw produces a value
together with its whole (lazy) shrink tree. Shrinks come from the same
machinery that produced the value, so any invariant a generator
establishes also holds for every shrink of its output.

Usage:
    ints = Gen.int_range(0, 100)
    pairs = Gen.zip(ints, Gen.boolean())
    words = Gen.string(Range.linear(0, 10), Gen.alpha())
    evens = ints.filter(lambda x: x % 2 == 0)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from prickle import shrink as shrink_
from prickle.errors import InvalidGeneratorError
from prickle.random import Random, Size
from prickle.range import Range
from prickle.seed import Seed
from prickle.tree import Tree

# Size used by generate_tree when the caller does not choose one.
DEFAULT_GENERATE_SIZE = 30


def _identity(x: Any) -> Any:
    return x


class Gen[T]:
    """A generator for values and shrink trees of type ``T``."""

    __slots__ = ("random",)

    def __init__(self, random: Random[Tree[T]]) -> None:
        self.random = random

    # =========================================================================
    # Construction
    # =========================================================================

    @staticmethod
    def create(shrink: Callable[[T], Iterable[T]], random: Random[T]) -> Gen[T]:
        """Draw a value with ``random`` and unfold its shrink tree with ``shrink``."""
        return Gen(random.map(lambda x: Tree.unfold(_identity, shrink, x)))

    @staticmethod
    def constant(x: T) -> Gen[T]:
        """A generator that always yields ``x`` and never shrinks."""
        return Gen(Random.constant(Tree.singleton(x)))

    @staticmethod
    def delay(f: Callable[[], Gen[T]]) -> Gen[T]:
        return Gen(Random.delay(lambda: f().random))

    # =========================================================================
    # Composition
    # =========================================================================

    def map_random[U](self, f: Callable[[Random[Tree[T]]], Random[Tree[U]]]) -> Gen[U]:
        return Gen(f(self.random))

    def map_tree[U](self, f: Callable[[Tree[T]], Tree[U]]) -> Gen[U]:
        return Gen(self.random.map(f))

    def map[U](self, f: Callable[[T], U]) -> Gen[U]:
        return self.map_tree(lambda tree: tree.map(f))

    def bind[U](self, k: Callable[[T], Gen[U]]) -> Gen[U]:
        """Sequence a dependent generator.

        The seed is split between the two sides; the resulting tree tries
        shrinks of this generator's value before those of the continuation.
        """
        m = self.random

        def run(seed: Seed, size: Size) -> Tree[U]:
            seed1, seed2 = seed.split()
            tree = m.run(seed1, size)
            return tree.bind(lambda x: k(x).random.run(seed2, size))

        return Gen(Random(run))

    def apply[A, B](self: Gen[Callable[[A], B]], gx: Gen[A]) -> Gen[B]:
        return self.bind(lambda f: gx.bind(lambda x: Gen.constant(f(x))))

    @staticmethod
    def map2[A, B, C](f: Callable[[A, B], C], gx: Gen[A], gy: Gen[B]) -> Gen[C]:
        return gx.bind(lambda x: gy.bind(lambda y: Gen.constant(f(x, y))))

    @staticmethod
    def map3[A, B, C, D](f: Callable[[A, B, C], D], gx: Gen[A], gy: Gen[B], gz: Gen[C]) -> Gen[D]:
        return gx.bind(lambda x: gy.bind(lambda y: gz.bind(lambda z: Gen.constant(f(x, y, z)))))

    @staticmethod
    def zip[A, B](gx: Gen[A], gy: Gen[B]) -> Gen[tuple[A, B]]:
        return Gen.map2(lambda x, y: (x, y), gx, gy)

    @staticmethod
    def zip3[A, B, C](gx: Gen[A], gy: Gen[B], gz: Gen[C]) -> Gen[tuple[A, B, C]]:
        return Gen.map3(lambda x, y, z: (x, y, z), gx, gy, gz)

    def tuple2(self) -> Gen[tuple[T, T]]:
        return Gen.zip(self, self)

    def tuple3(self) -> Gen[tuple[T, T, T]]:
        return Gen.zip3(self, self, self)

    # =========================================================================
    # Faults
    # =========================================================================

    def try_finally(self, after: Callable[[], None]) -> Gen[T]:
        return Gen(self.random.try_finally(after))

    def try_with(self, handler: Callable[[Exception], Gen[T]]) -> Gen[T]:
        return Gen(self.random.try_with(lambda e: handler(e).random))

    # =========================================================================
    # Shrinking
    # =========================================================================

    def no_shrink(self) -> Gen[T]:
        """Prevent the generator from shrinking."""
        return self.map_tree(lambda tree: Tree.singleton(tree.outcome))

    def shrink(self, f: Callable[[T], Iterable[T]]) -> Gen[T]:
        """Apply an additional shrinker to every generated tree."""
        return self.map_tree(lambda tree: tree.expand(f))

    # =========================================================================
    # Size
    # =========================================================================

    @staticmethod
    def sized(f: Callable[[Size], Gen[T]]) -> Gen[T]:
        """Construct a generator that depends on the size parameter."""
        return Gen(Random.sized(lambda size: f(size).random))

    def resize(self, n: Size) -> Gen[T]:
        """Use ``n`` instead of the runtime size parameter."""
        return self.map_random(lambda r: r.resize(n))

    def scale(self, f: Callable[[Size], Size]) -> Gen[T]:
        """Adjust the size parameter by transforming it with ``f``."""
        return Gen.sized(lambda n: self.resize(f(n)))

    # =========================================================================
    # Numeric
    # =========================================================================

    @staticmethod
    def integral(range_: Range[int]) -> Gen[int]:
        """An integer within the range, shrinking towards the range's origin."""
        origin = range_.origin
        return Gen.create(lambda x: shrink_.towards(origin, x), Random.integral(range_))

    @staticmethod
    def int_range(lo: int, hi: int) -> Gen[int]:
        """An integer in the constant range [lo, hi], shrinking towards ``lo``."""
        return Gen.integral(Range.constant(lo, hi))

    @staticmethod
    def integer(bits: int = 64) -> Gen[int]:
        """A signed fixed-width integer that grows with size and shrinks towards 0."""
        return Gen.integral(Range.linear_bounded(bits))  # type: ignore[arg-type]

    @staticmethod
    def double(range_: Range[float]) -> Gen[float]:
        """A float within the range, shrinking towards the range's origin."""
        origin = float(range_.origin)
        return Gen.create(lambda x: shrink_.towards_double(origin, x), Random.double(range_))

    # =========================================================================
    # Choice
    # =========================================================================

    @staticmethod
    def item(xs: Iterable[T]) -> Gen[T]:
        """Select one of the values uniformly, shrinking towards the first.

        Raises:
            InvalidGeneratorError: If ``xs`` is empty.
        """
        items = tuple(xs)
        if not items:
            raise InvalidGeneratorError("'xs' must have at least one element")
        return Gen.int_range(0, len(items) - 1).map(lambda ix: items[ix])

    @staticmethod
    def frequency(xs: Iterable[tuple[int, Gen[T]]]) -> Gen[T]:
        """Select a generator using a weighted distribution.

        Raises:
            InvalidGeneratorError: If ``xs`` is empty or its weights sum below 1.
        """
        table = tuple(xs)
        total = sum(weight for weight, _ in table)
        if not table or total < 1:
            raise InvalidGeneratorError("'xs' must have at least one element with positive weight")

        def pick(n: int) -> Gen[T]:
            for weight, g in table:
                if n <= weight:
                    return g
                n -= weight
            raise InvalidGeneratorError("frequency pick exceeded the total weight")

        return Gen.int_range(1, total).bind(pick)

    @staticmethod
    def choice(gens: Iterable[Gen[T]]) -> Gen[T]:
        """Select one of the generators uniformly.

        Raises:
            InvalidGeneratorError: If ``gens`` is empty.
        """
        options = tuple(gens)
        if not options:
            raise InvalidGeneratorError("'gens' must have at least one element")
        return Gen.int_range(0, len(options) - 1).bind(lambda ix: options[ix])

    @staticmethod
    def choice_rec(nonrecs: Iterable[Gen[T]], recs: Iterable[Gen[T]]) -> Gen[T]:
        """Select from non-recursive or recursive generators.

        Picking a recursive generator halves the size; once the size is 1
        or less only non-recursive generators are chosen.
        """
        base = tuple(nonrecs)
        recursive = tuple(recs)
        if not base:
            raise InvalidGeneratorError("'nonrecs' must have at least one element")

        def choose(n: Size) -> Gen[T]:
            if n <= 1:
                return Gen.choice(base)
            return Gen.choice(base + tuple(g.scale(lambda x: x // 2) for g in recursive))

        return Gen.sized(choose)

    # =========================================================================
    # Conditional
    # =========================================================================

    def _try_filter_random(self, pred: Callable[[T], bool]) -> Random[Tree[T] | None]:
        """Make up to ``size`` attempts, the k-th at size ``2k + n`` for ``n`` attempts left.

        Each attempt draws from the left half of a seed split and the next
        attempt continues from the right half. Shrinks of an accepted tree
        also satisfy ``pred``.
        """
        r0 = self.random

        def run(seed: Seed, size: Size) -> Tree[T] | None:
            k, n = 0, max(1, size)
            while n > 0:
                seed1, seed = seed.split()
                tree = r0.run(seed1, 2 * k + n)
                if pred(tree.outcome):
                    return tree.filter(pred)
                k, n = k + 1, n - 1
            return None

        return Random(run)

    def filter(self, pred: Callable[[T], bool]) -> Gen[T]:
        """Generate values satisfying ``pred``, growing the size on repeated misses.

        Loops until ``pred`` accepts a value, so an unsatisfiable predicate
        never returns.
        """
        attempt = self._try_filter_random(pred)

        def run(seed: Seed, size: Size) -> Tree[T]:
            while True:
                seed1, seed = seed.split()
                tree = attempt.unsafe_run(seed1, size)
                if tree is not None:
                    return tree
                size = max(1, size + 1)

        return Gen(Random(run))

    def try_filter(self, pred: Callable[[T], bool]) -> Gen[T | None]:
        """Try to generate a value satisfying ``pred``, yielding None on failure."""

        def on_result(tree: Tree[T] | None) -> Random[Tree[T | None]]:
            if tree is None:
                return Random.constant(Tree.singleton(None))
            return Random.constant(tree.map(_identity))

        return Gen(self._try_filter_random(pred).bind(on_result))

    @staticmethod
    def some(g: Gen[T | None]) -> Gen[T]:
        """Run an optional generator until it produces a value."""
        return g.filter(lambda x: x is not None)  # type: ignore[return-value]

    def option(self) -> Gen[T | None]:
        """Generate None part of the time, less often as the size grows."""
        return Gen.sized(lambda n: Gen.frequency([(2, Gen.constant(None)), (1 + n, self.map(_identity))]))

    # =========================================================================
    # Collections
    # =========================================================================

    def list_of(self, range_: Range[int] | None = None) -> Gen[list[T]]:
        """A list whose length is drawn from ``range_``.

        Shrinks the length towards the range's lower bound and each element
        using its own shrink tree. Defaults to ``Range.linear(0, 100)``.
        """
        length = range_ if range_ is not None else Range.linear(0, 100)
        element = self.random

        def build(size: Size) -> Random[Tree[list[T]]]:
            lower = length.lower_bound(size)

            def trees(k: int) -> Random[Tree[list[T]]]:
                return element.replicate(k).map(lambda ts: shrink_.sequence_list(ts).filter(lambda xs: len(xs) >= lower))

            return Random.integral(length).bind(trees)

        return Gen(Random.sized(build))

    def fixed_list(self, n: int) -> Gen[list[T]]:
        """A list of exactly ``n`` elements; only the elements shrink."""
        return Gen(self.random.replicate(n).map(shrink_.sequence_elems))

    # =========================================================================
    # Characters and Strings
    # =========================================================================

    @staticmethod
    def char(lo: str, hi: str) -> Gen[str]:
        """A character between ``lo`` and ``hi`` inclusive."""
        return Gen.int_range(ord(lo), ord(hi)).map(chr)

    @staticmethod
    def digit() -> Gen[str]:
        return Gen.char("0", "9")

    @staticmethod
    def lower() -> Gen[str]:
        return Gen.char("a", "z")

    @staticmethod
    def upper() -> Gen[str]:
        return Gen.char("A", "Z")

    @staticmethod
    def ascii() -> Gen[str]:
        return Gen.char("\x00", "\x7f")

    @staticmethod
    def latin1() -> Gen[str]:
        return Gen.char("\x00", "\xff")

    @staticmethod
    def unicode() -> Gen[str]:
        """A code point from the Basic Multilingual Plane, excluding surrogates."""
        return Gen.char("\x00", "\uffff").filter(lambda c: not 0xD800 <= ord(c) <= 0xDFFF)

    @staticmethod
    def alpha() -> Gen[str]:
        return Gen.choice([Gen.lower(), Gen.upper()])

    @staticmethod
    def alpha_num() -> Gen[str]:
        return Gen.choice([Gen.lower(), Gen.upper(), Gen.digit()])

    @staticmethod
    def string(range_: Range[int], g: Gen[str]) -> Gen[str]:
        """A string whose length is drawn from ``range_``."""
        return g.list_of(range_).map("".join)

    # =========================================================================
    # Primitives
    # =========================================================================

    @staticmethod
    def boolean() -> Gen[bool]:
        """A boolean, shrinking towards False."""
        return Gen.item([False, True])

    # =========================================================================
    # Sampling
    # =========================================================================

    def sample_tree(self, size: Size, count: int, seed: Seed | None = None) -> list[Tree[T]]:
        """Draw ``count`` independent trees at a fixed size. For diagnostics."""
        seed = seed if seed is not None else Seed.random()
        return self.random.replicate(count).run(seed, size)

    def sample(self, size: Size, count: int, seed: Seed | None = None) -> list[T]:
        """Draw ``count`` independent values at a fixed size. For diagnostics."""
        return [tree.outcome for tree in self.sample_tree(size, count, seed)]

    def generate_tree(self, size: Size = DEFAULT_GENERATE_SIZE, seed: Seed | None = None) -> Tree[T]:
        seed = seed if seed is not None else Seed.random()
        return self.random.run(seed, size)

    def render_sample(
        self,
        size: Size = 10,
        count: int = 5,
        seed: Seed | None = None,
        *,
        max_shrinks: int = 10,
    ) -> str:
        """Render sampled outcomes alongside their first immediate shrinks."""
        lines: list[str] = []
        for tree in self.sample_tree(size, count, seed):
            lines.append("=== Outcome ===")
            lines.append(repr(tree.outcome))
            lines.append("=== Shrinks ===")
            lines.extend(repr(child.outcome) for child in tree.children.take(max_shrinks))
            lines.append(".")
        return "\n".join(lines)


def sequence[T](gens: Sequence[Gen[T]]) -> Gen[list[T]]:
    """Combine a fixed sequence of generators into a generator of lists."""
    acc: Gen[list[T]] = Gen.constant([])
    for g in reversed(gens):
        acc = Gen.map2(lambda x, xs: [x, *xs], g, acc)
    return acc

