# src/cayleysearch/combinator.py
from __future__ import annotations

from collections.abc import Iterator
from math import comb


class Combinator:
    """
    All k-element combinations of the indices 0..n-1, in lexicographic order.

    Usage:
        combi = Combinator(5, 2)
        v = [0] * 2
        while combi.next(v):
            ...            # v == [0, 1], [0, 2], ..., [3, 4]
    """

    def __init__(self, n: int, k: int):
        self.n = int(n)
        self.k = int(k)
        self._current = list(range(self.k))
        self._done = self.k < 0 or self.k > self.n

    def __len__(self) -> int:
        return comb(self.n, self.k) if 0 <= self.k <= self.n else 0

    def next(self, out: list[int]) -> bool:
        """
        Write the next combination into out (0-based indices) and return True.
        Returns False and leaves out untouched once every combination was produced.
        """
        if self._done:
            return False

        c = self._current
        out[:] = c

        # successor: rightmost index below its maximum, then consecutive run after it
        n, k = self.n, self.k
        i = k - 1
        while i >= 0 and c[i] == n - k + i:
            i -= 1
        if i < 0:
            self._done = True
        else:
            c[i] += 1
            for j in range(i + 1, k):
                c[j] = c[j - 1] + 1

        return True

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        v = [0] * max(self.k, 0)
        while self.next(v):
            yield tuple(v)
