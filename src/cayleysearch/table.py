# src/cayleysearch/table.py
from __future__ import annotations

from cayleysearch.utility import MAX_ORDER, MIN_ORDER, ConfigurationError, bit

EMPTY = 0


class OperationTable:
    """
    Square table of a binary operation on the values 1..order.

    Cells are stored row-major in a flat list; ``cells[y * order + x]`` is the
    product of the element in row y with the element in column x. 0 marks an
    unfilled cell. Row 0 and column 0 hold the identity's row and column and
    are never changed after ``clear()``.

    ``row_values[y]`` / ``column_values[x]`` are bitmaps of the values
    currently placed in that row / column.
    """

    def __init__(self, order: int):
        if order < MIN_ORDER or order > MAX_ORDER:
            raise ConfigurationError(f"Invalid order value {order}. Allowed: {MIN_ORDER} -> {MAX_ORDER}")
        self.order = int(order)
        self.size = self.order * self.order
        self.cells: list[int] = []
        self.row_values: list[int] = []
        self.column_values: list[int] = []
        self.clear()

    def clear(self) -> None:
        n = self.order
        self.cells = [EMPTY] * self.size
        self.row_values = [0] * n
        self.column_values = [0] * n

        # fixed identity row and column
        for i in range(n):
            self.cells[i] = i + 1
            self.column_values[i] |= bit(i + 1)
            self.cells[i * n] = i + 1
            self.row_values[i] |= bit(i + 1)

    def mul(self, a: int, b: int) -> int:
        """Value at row a, column b (0-based element indices); 0 if unknown."""
        return self.cells[a * self.order + b]

    def place(self, x: int, y: int, value: int) -> None:
        b = bit(value)
        self.cells[y * self.order + x] = value
        self.row_values[y] |= b
        self.column_values[x] |= b

    def remove(self, x: int, y: int) -> int:
        """Empty cell (x, y) and return the value it held (0 if it was empty)."""
        pos = y * self.order + x
        value = self.cells[pos]
        if value == EMPTY:
            return EMPTY
        mask = ~bit(value)
        self.cells[pos] = EMPTY
        self.row_values[y] &= mask
        self.column_values[x] &= mask
        return value

    def rows(self) -> tuple[tuple[int, ...], ...]:
        n = self.order
        return tuple(tuple(self.cells[r * n:(r + 1) * n]) for r in range(n))

    def __repr__(self):
        return f"OperationTable(order={self.order})"
