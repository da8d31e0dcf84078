# -----------------------------------------------------------------------------
#  search.py
#  Backtracking search over operation tables (quasigroups and groups).
# -----------------------------------------------------------------------------

from __future__ import annotations

import random
import time
from collections.abc import Iterator

from cayleysearch.table import EMPTY, OperationTable
from cayleysearch.utility import (
    MAX_ORDER,
    MIN_ORDER,
    ConfigurationError,
    associativity_violation,
    bit,
    full_mask,
    lowest_value,
    nth_value,
    popcount,
)

"""
The engine fills the interior cells (row and column >= 1) in row-major
order. Every cell keeps a "track" bitmap of the values already tried there;
it is only cleared when the search backs out of the cell, so a value that
failed once is not proposed again while the cells before it are unchanged.
The strategies differ only in how a candidate for the current cell is chosen.
"""


def associativity_holds(table: OperationTable, x: int, y: int, value: int) -> bool:
    """
    Probe a tentative ``value`` = y*x at cell (x, y) against the known cells.

    Right form: (y*x)*i == y*(x*i); left form: i*(y*x) == (i*y)*x.
    A form with an unknown operand carries no information and is skipped.
    The tentative value must already be written to the cell.
    """
    n = table.order
    cells = table.cells
    v = value - 1
    for i in range(n):
        left = cells[v * n + i]
        if left:
            x_i = cells[x * n + i]
            if x_i:
                right = cells[y * n + x_i - 1]
                if right and left != right:
                    return False

        left = cells[i * n + v]
        if left:
            i_y = cells[i * n + y]
            if i_y:
                right = cells[(i_y - 1) * n + x]
                if right and left != right:
                    return False
    return True


# ---------- Candidate strategies ----------------------------------------------

class CandidateStrategy:
    name = "base"
    max_order = MAX_ORDER - 1

    def find_candidate(self, engine: SearchEngine) -> int | None:
        raise NotImplementedError

    def accepts(self, table: OperationTable) -> bool:
        """Final say on a completely filled table."""
        return True

    def __repr__(self):
        return f"{type(self).__name__}()"


class PlainLatinSearch(CandidateStrategy):
    """Latin-square constraint only: lowest value unused in row, column and track."""
    name = "latin"

    def find_candidate(self, engine: SearchEngine) -> int | None:
        engine.probes += 1
        return lowest_value(engine.candidates())


class AssociativeSearch(CandidateStrategy):
    """Latin square plus associativity pruning, candidates in ascending order."""
    name = "group"

    def _pick(self, mask: int) -> int:
        return lowest_value(mask)

    def find_candidate(self, engine: SearchEngine) -> int | None:
        table = engine.table
        pos, x, y = engine.pos, engine.x, engine.y
        old_value = table.cells[pos]

        while True:
            mask = engine.candidates()
            if not mask:
                table.cells[pos] = old_value
                return None

            value = self._pick(mask)
            engine.probes += 1
            table.cells[pos] = value
            if associativity_holds(table, x, y, value):
                table.cells[pos] = old_value
                return value

            # provably wrong here, never offer it again from this cell
            engine.track[pos] |= bit(value)

    def accepts(self, table: OperationTable) -> bool:
        return associativity_violation(table.order, table.cells) is None


class RandomAssociativeSearch(AssociativeSearch):
    """
    Same pruning as AssociativeSearch, but each candidate is drawn uniformly
    from the remaining feasible values. Owns its generator; equal seeds give
    equal solution sequences.
    """
    name = "random"
    max_order = MAX_ORDER

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = time.time_ns()
        self.seed = int(seed) & 0xFFFFFFFF
        self.rng = random.Random(self.seed)

    def _pick(self, mask: int) -> int:
        return nth_value(mask, self.rng.randrange(popcount(mask)))

    def reseed(self, entropy: int | None = None) -> None:
        """Mix fresh entropy (default: the clock) into the seed and restart the generator."""
        if entropy is None:
            entropy = time.time_ns()
        self.seed = (self.seed ^ self.rng.getrandbits(32) ^ int(entropy)) & 0xFFFFFFFF
        self.rng.seed(self.seed)

    def __repr__(self):
        return f"RandomAssociativeSearch(seed={self.seed})"


# ---------- Engine --------------------------------------------------------------

class SearchEngine:
    """
    Enumerates completed operation tables, one per ``advance()`` call.

        engine = SearchEngine(6, AssociativeSearch())
        while engine.advance():
            print(engine.rows())

    ``advance()`` returns False once the search space is exhausted; the
    engine then stays exhausted until ``reset()`` or ``reseed()``.
    """

    def __init__(self, order: int, strategy: CandidateStrategy | None = None):
        strategy = strategy if strategy is not None else AssociativeSearch()
        if order < MIN_ORDER or order > strategy.max_order:
            raise ConfigurationError(
                f"Invalid order value {order} for {strategy.name} search. "
                f"Allowed: {MIN_ORDER} -> {strategy.max_order}"
            )
        self.order = int(order)
        self.strategy = strategy
        self.table = OperationTable(self.order)
        self.track: list[int] = [0] * self.table.size
        self._full = full_mask(self.order)
        self.probes = 0
        self.backtracks = 0
        self._rewind()

    def _rewind(self) -> None:
        self.x = 1
        self.y = 1
        self.pos = self.order + 1
        self.found = False
        self.exhausted = False

    # --- cursor -----------------------------------------------------------------

    def _step_forward(self) -> bool:
        if self.x >= self.order - 1:
            if self.y >= self.order - 1:
                return False
            self.x = 1
            self.y += 1
            self.pos += 2
        else:
            self.x += 1
            self.pos += 1
        return True

    def _step_backward(self) -> bool:
        if self.x <= 1:
            if self.y <= 1:
                return False
            self.x = self.order - 1
            self.y -= 1
            self.pos -= 2
        else:
            self.x -= 1
            self.pos -= 1
        return True

    # --- cell state -------------------------------------------------------------

    def candidates(self) -> int:
        """Bitmap of values still allowed at the cursor cell."""
        t = self.table
        used = self.track[self.pos] | t.row_values[self.y] | t.column_values[self.x]
        return self._full & ~used

    def _set(self, value: int) -> None:
        self.table.place(self.x, self.y, value)
        self.track[self.pos] |= bit(value)

    def _unset(self, backtracking: bool) -> None:
        if backtracking:
            self.track[self.pos] = 0
        self.table.remove(self.x, self.y)

    def _backtrack(self) -> int | None:
        while self._step_backward():
            self.backtracks += 1
            value = self.strategy.find_candidate(self)
            if value is not None:
                return value
            self._unset(backtracking=True)
        return None

    # --- public API -------------------------------------------------------------

    def advance(self) -> bool:
        """Produce the next solution. True if a complete table is available."""
        if self.exhausted:
            return False
        self.found = False

        while True:
            value = self.strategy.find_candidate(self)
            if value is None:
                self._unset(backtracking=True)
                value = self._backtrack()
                if value is None:
                    self.exhausted = True
                    return False

            self._unset(backtracking=False)
            self._set(value)

            if self._step_forward():
                continue
            if self.strategy.accepts(self.table):
                break
            # rejected: the last cell's value is in its track, keep searching from there

        self.found = True
        return True

    def has_solution(self) -> bool:
        return self.found

    def rows(self) -> tuple[tuple[int, ...], ...]:
        return self.table.rows()

    def solutions(self, limit: int | None = None) -> Iterator[tuple[tuple[int, ...], ...]]:
        produced = 0
        while (limit is None or produced < limit) and self.advance():
            produced += 1
            yield self.rows()

    def reset(self) -> None:
        """Clear the table, all track memory and the cursor."""
        self.table.clear()
        self.track = [0] * self.table.size
        self.probes = 0
        self.backtracks = 0
        self._rewind()

    def reseed(self, entropy: int | None = None) -> None:
        reseed = getattr(self.strategy, "reseed", None)
        if reseed is None:
            raise ConfigurationError(f"The {self.strategy.name} search has no random generator to reseed.")
        reseed(entropy)
        self.reset()

    def as_text(self, show_track: bool = False) -> str:
        n = self.order
        lines = []
        for r in range(n):
            row = "".join(f"{self.table.cells[r * n + c]:02d};" for c in range(n))
            if show_track:
                row += "    " + "".join(f"{self.track[r * n + c]:0{n}b};" for c in range(n))
            lines.append(row)
        return "\n".join(lines) + "\n"

    def __repr__(self):
        return f"SearchEngine(order={self.order}, strategy={self.strategy!r})"


# ---------- Factories -----------------------------------------------------------

def latin_search(order: int) -> SearchEngine:
    return SearchEngine(order, PlainLatinSearch())


def group_search(order: int) -> SearchEngine:
    return SearchEngine(order, AssociativeSearch())


def random_group_search(order: int, seed: int | None = None) -> SearchEngine:
    return SearchEngine(order, RandomAssociativeSearch(seed))


MODES = {
    "latin": latin_search,
    "group": group_search,
    "random": random_group_search,
}


def make_engine(mode: str, order: int, seed: int | None = None) -> SearchEngine:
    key = (mode or "group").strip().lower()
    factory = MODES.get(key)
    if factory is None:
        raise ConfigurationError(f"Unknown search mode '{mode}'. Choose one of: {', '.join(MODES)}")
    if key == "random":
        return factory(order, seed)
    return factory(order)


__all__ = [
    "EMPTY",
    "MODES",
    "AssociativeSearch",
    "CandidateStrategy",
    "PlainLatinSearch",
    "RandomAssociativeSearch",
    "SearchEngine",
    "associativity_holds",
    "group_search",
    "latin_search",
    "make_engine",
    "random_group_search",
]
