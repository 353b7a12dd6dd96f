# src/prickle/random.py
"""Pure random computations: functions of a seed and a size.

``Random[T]`` wraps a function ``(Seed, Size) -> T``. It carries no state:
running the same computation with the same seed and size always yields
the same value, which is what makes failures replayable.

Composition splits the seed, so the two halves of a ``bind`` draw from
independent streams and never alias one another.
"""

from __future__ import annotations

from collections.abc import Callable

from prickle.range import Range
from prickle.seed import Seed

type Size = int


class Random[T]:
    """A generator for random values of type ``T``."""

    __slots__ = ("_run",)

    def __init__(self, run: Callable[[Seed, Size], T]) -> None:
        self._run = run

    def unsafe_run(self, seed: Seed, size: Size) -> T:
        """Run without clamping the size."""
        return self._run(seed, size)

    def run(self, seed: Seed, size: Size) -> T:
        """Run the computation, clamping the size to at least 1."""
        return self._run(seed, max(1, size))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @staticmethod
    def constant(x: T) -> Random[T]:
        return Random(lambda _seed, _size: x)

    @staticmethod
    def delay(f: Callable[[], Random[T]]) -> Random[T]:
        """Defer building a computation until it is run."""
        return Random(lambda seed, size: f().unsafe_run(seed, size))

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def map[U](self, f: Callable[[T], U]) -> Random[U]:
        return Random(lambda seed, size: f(self.unsafe_run(seed, size)))

    def bind[U](self, k: Callable[[T], Random[U]]) -> Random[U]:
        """Sequence a continuation, giving each side its own half of the seed."""

        def run(seed: Seed, size: Size) -> U:
            seed1, seed2 = seed.split()
            x = self.unsafe_run(seed1, size)
            return k(x).unsafe_run(seed2, size)

        return Random(run)

    @staticmethod
    def join(r: Random[Random[T]]) -> Random[T]:
        return r.bind(lambda inner: inner)

    def replicate(self, times: int) -> Random[list[T]]:
        """Draw ``times`` independent values by repeated splitting."""

        def run(seed: Seed, size: Size) -> list[T]:
            acc: list[T] = []
            for _ in range(times):
                seed1, seed = seed.split()
                acc.append(self.unsafe_run(seed1, size))
            return acc

        return Random(run)

    # -------------------------------------------------------------------------
    # Faults
    # -------------------------------------------------------------------------

    def try_finally(self, after: Callable[[], None]) -> Random[T]:
        """Run ``after`` once the computation finishes, even if it raises."""

        def run(seed: Seed, size: Size) -> T:
            try:
                return self.unsafe_run(seed, size)
            finally:
                after()

        return Random(run)

    def try_with(self, handler: Callable[[Exception], Random[T]]) -> Random[T]:
        """Recover from an exception by running the handler's computation."""

        def run(seed: Seed, size: Size) -> T:
            try:
                return self.unsafe_run(seed, size)
            except Exception as e:
                return handler(e).unsafe_run(seed, size)

        return Random(run)

    # -------------------------------------------------------------------------
    # Size
    # -------------------------------------------------------------------------

    @staticmethod
    def sized(f: Callable[[Size], Random[T]]) -> Random[T]:
        """Construct a computation that depends on the size parameter."""
        return Random(lambda seed, size: f(size).unsafe_run(seed, size))

    def resize(self, new_size: Size) -> Random[T]:
        """Use ``new_size`` instead of the runtime size parameter."""
        return Random(lambda seed, _size: self.run(seed, new_size))

    def scale(self, f: Callable[[Size], Size]) -> Random[T]:
        """Adjust the size parameter by transforming it with ``f``."""
        return Random.sized(lambda size: self.resize(f(size)))

    # -------------------------------------------------------------------------
    # Numeric
    # -------------------------------------------------------------------------

    @staticmethod
    def integral(range_: Range[int]) -> Random[int]:
        """Draw an integer within the range's bounds for the current size."""

        def run(seed: Seed, size: Size) -> int:
            lo, hi = range_.lower_bound(size), range_.upper_bound(size)
            x, _ = seed.next_bounded(lo, hi)
            return x

        return Random(run)

    @staticmethod
    def double(range_: Range[float]) -> Random[float]:
        """Draw a float within the range's bounds for the current size."""

        def run(seed: Seed, size: Size) -> float:
            lo, hi = range_.lower_bound(size), range_.upper_bound(size)
            x, _ = seed.next_double(float(lo), float(hi))
            return x

        return Random(run)
