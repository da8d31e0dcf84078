# -----------------------------------------------------------------------------
#  utility.py
#  Errors, element bitmaps, table checks and terminal helpers.
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import shutil
import sys
from collections.abc import Sequence

import gmpy2

from cayleysearch.context import GroupCtx

MIN_ORDER = 2
MAX_ORDER = 32    # one bit per element in a row/column mask


class UserInputError(Exception):
    pass


class ConfigurationError(UserInputError):
    """Invalid order or table handed to an engine or to build_ctx."""


class InvariantViolation(RuntimeError):
    """The operation table is not the Cayley table of a group."""


# --- Bitmaps -------------------------------------------------------------------
# Bit k stands for element value k+1.

def bit(value: int) -> int:
    return 1 << (value - 1)


def full_mask(order: int) -> int:
    return (1 << order) - 1


def lowest_value(mask: int) -> int | None:
    """Smallest element value present in mask, or None if mask is empty."""
    if not mask:
        return None
    return int(gmpy2.bit_scan1(mask)) + 1


def nth_value(mask: int, k: int) -> int:
    """Element value of the k-th (0-based) set bit of mask, counted from bit 0."""
    idx = gmpy2.bit_scan1(mask)
    for _ in range(k):
        idx = gmpy2.bit_scan1(mask, idx + 1)
    return int(idx) + 1


def popcount(mask: int) -> int:
    return int(gmpy2.popcount(mask))


# --- Table checks --------------------------------------------------------------

def associativity_violation(order: int, cells: Sequence[int]) -> tuple[int, int, int] | None:
    """
    First (i, j, k) (1-based) with (i*j)*k != i*(j*k) in a filled flat table,
    or None if the operation is associative.
    """
    n = order
    for i in range(n):
        for j in range(n):
            ij = cells[i * n + j] - 1
            for k in range(n):
                left = cells[ij * n + k]
                jk = cells[j * n + k] - 1
                right = cells[i * n + jk]
                if left != right:
                    return i + 1, j + 1, k + 1
    return None


def latin_violation(order: int, cells: Sequence[int]) -> str | None:
    """Describe the first row or column that is not a permutation, else None."""
    n = order
    want = full_mask(n)
    for r in range(n):
        seen = 0
        for c in range(n):
            seen |= bit(cells[r * n + c])
        if seen != want:
            return f"row {r + 1} is not a permutation of 1..{n}"
    for c in range(n):
        seen = 0
        for r in range(n):
            seen |= bit(cells[r * n + c])
        if seen != want:
            return f"column {c + 1} is not a permutation of 1..{n}"
    return None


def build_ctx(table) -> GroupCtx:
    """
    Snapshot a completed operation table.

    Accepts anything with a ``rows()`` method (engines, OperationTable) or a
    square sequence of rows. Values must be 1..N with element 1 acting as
    the identity.
    """
    rows = table.rows() if hasattr(table, "rows") else table
    rows = [tuple(int(v) for v in row) for row in rows]
    n = len(rows)

    if n < MIN_ORDER or n > MAX_ORDER:
        raise ConfigurationError(f"Invalid order {n}. Allowed: {MIN_ORDER} -> {MAX_ORDER}")
    for r, row in enumerate(rows, start=1):
        if len(row) != n:
            raise ConfigurationError(f"Row {r} has {len(row)} entries, expected {n}.")
        for v in row:
            if not 1 <= v <= n:
                raise ConfigurationError(f"Row {r} holds {v}; values must be in 1..{n}.")
    for i in range(n):
        if rows[0][i] != i + 1 or rows[i][0] != i + 1:
            raise ConfigurationError("Element 1 must be the identity (first row and column 1..N).")

    cells = tuple(v for row in rows for v in row)
    return GroupCtx(
        order=n,
        cells=cells,
        associative=associativity_violation(n, cells) is None,
        latin=latin_violation(n, cells) is None,
    )


# --- Terminal -------------------------------------------------------------------

def terminal_size() -> tuple[int, int]:
    size = shutil.get_terminal_size(fallback=(80, 24))
    return size.columns, size.lines


def get_terminal_width() -> int:
    return terminal_size()[0]


def clear_screen() -> None:
    """Clear the terminal and its scrollback; leaves redirected output alone."""
    if not sys.stdout.isatty():
        return
    if os.name == "nt":
        os.system("cls")
    else:
        sys.stdout.write("\033[3J\033[H\033[2J")
        sys.stdout.flush()
