# -----------------------------------------------------------------------------
#  groups.py
#  Finite group algorithms on a completed operation table.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

from sympy import divisors

from cayleysearch.combinator import Combinator
from cayleysearch.context import GroupCtx
from cayleysearch.utility import InvariantViolation, bit, full_mask
from cayleysearch.utility import associativity_violation as _flat_associativity_violation

IDENTITY = GroupCtx.IDENTITY

Subgroup = tuple[int, ...]


def format_elements(elements: Sequence[int]) -> str:
    return "{" + ", ".join(map(str, elements)) + "}"


def associativity_violation(ctx: GroupCtx) -> tuple[int, int, int] | None:
    return _flat_associativity_violation(ctx.order, ctx.cells)


def commutativity_violation(ctx: GroupCtx) -> tuple[int, int] | None:
    """First pair (a, b) with a*b != b*a, else None."""
    for a in ctx.elements:
        for b in range(a + 1, ctx.order + 1):
            if ctx.mul(a, b) != ctx.mul(b, a):
                return a, b
    return None


def _members_mask(members: Sequence[int]) -> int:
    mask = 0
    for m in members:
        mask |= bit(m)
    return mask


def is_closed(ctx: GroupCtx, members: Sequence[int]) -> bool:
    """True if a*b lies in members for every ordered pair from members."""
    mask = _members_mask(members)
    for a in members:
        for b in members:
            if not mask & bit(ctx.mul(a, b)):
                return False
    return True


@lru_cache(maxsize=64)
def subgroups(ctx: GroupCtx) -> tuple[Subgroup, ...]:
    """
    Proper nontrivial subgroups, smallest first, each as sorted element values.

    Only subgroup sizes dividing the order are tried (Lagrange). In a finite
    group a closed nonempty subset is already a subgroup, so closure is the
    only test.
    """
    n = ctx.order
    found: list[Subgroup] = []
    for size in divisors(n):
        if size < 2 or size > n // 2:
            continue
        combi = Combinator(n, size)
        v = [0] * size
        while combi.next(v):
            members = [i + 1 for i in v]
            if is_closed(ctx, members):
                found.append(tuple(members))
    return tuple(found)


def inverse(ctx: GroupCtx, g: int) -> int:
    for x in ctx.elements:
        if ctx.mul(x, g) == IDENTITY:
            return x
    raise InvariantViolation(f"Element {g} has no inverse; the table is not a group.")


def normality_witness(ctx: GroupCtx, subgroup: Sequence[int]) -> tuple[int, int, int] | None:
    """First (g, n, g*n*g⁻¹) whose conjugate leaves the subgroup, else None."""
    mask = _members_mask(subgroup)
    for g in ctx.elements:
        g_inv = inverse(ctx, g)
        for n in subgroup:
            conj = ctx.mul(ctx.mul(g, n), g_inv)
            if not mask & bit(conj):
                return g, n, conj
    return None


def is_subgroup_normal(ctx: GroupCtx, subgroup: Sequence[int]) -> bool:
    return normality_witness(ctx, subgroup) is None


def normal_subgroups(ctx: GroupCtx) -> list[Subgroup]:
    return [s for s in subgroups(ctx) if is_subgroup_normal(ctx, s)]


def is_simple(ctx: GroupCtx) -> bool:
    return not normal_subgroups(ctx)


def is_dedekind(ctx: GroupCtx) -> bool:
    return all(is_subgroup_normal(ctx, s) for s in subgroups(ctx))


def is_hamiltonian(ctx: GroupCtx) -> bool:
    return commutativity_violation(ctx) is not None and is_dedekind(ctx)


# --- Powers & cyclicity ------------------------------------------------------------

def power_cycle(ctx: GroupCtx, g: int) -> list[int]:
    """
    g, g², g³, ... up to (not including) the identity.

    Raises InvariantViolation if the identity is not reached within
    ``order`` steps, which no group table allows.
    """
    cycle: list[int] = []
    current = g
    while current != IDENTITY:
        if len(cycle) >= ctx.order:
            raise InvariantViolation(
                f"Powers of {g} do not return to the identity within {ctx.order} steps; "
                "the table is not a group."
            )
        cycle.append(current)
        current = ctx.mul(current, g)
    return cycle


def element_order(ctx: GroupCtx, g: int) -> int:
    return len(power_cycle(ctx, g)) + 1


def generator(ctx: GroupCtx) -> int | None:
    """Smallest element whose powers cover the whole group, or None."""
    want = full_mask(ctx.order)
    for g in range(2, ctx.order + 1):
        visited = bit(IDENTITY) | _members_mask(power_cycle(ctx, g))
        if visited == want:
            return g
    return None


def is_cyclic(ctx: GroupCtx) -> bool:
    return generator(ctx) is not None
