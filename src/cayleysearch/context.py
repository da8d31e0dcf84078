from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GroupCtx:
    # --- non-default fields (no "= ...") FIRST ---
    order: int
    cells: tuple[int, ...]           # row-major, values 1..order

    # --- fields WITH defaults AFTER all non-defaults ---
    associative: bool = True         # computed once by build_ctx
    latin: bool = True               # every row/column a permutation

    IDENTITY = 1

    def mul(self, a: int, b: int) -> int:
        """a * b for 1-based element values."""
        return self.cells[(a - 1) * self.order + (b - 1)]

    @property
    def elements(self) -> range:
        return range(1, self.order + 1)

    @property
    def is_group(self) -> bool:
        return self.associative and self.latin

    def rows(self) -> tuple[tuple[int, ...], ...]:
        n = self.order
        return tuple(self.cells[r * n:(r + 1) * n] for r in range(n))
