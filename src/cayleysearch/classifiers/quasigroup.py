# -----------------------------------------------------------------------------
#  quasigroup.py
#  Properties of any operation table (no associativity assumed).
# -----------------------------------------------------------------------------

from __future__ import annotations

from cayleysearch.context import GroupCtx
from cayleysearch.groups import associativity_violation, commutativity_violation
from cayleysearch.registry import classifier
from cayleysearch.utility import latin_violation

CATEGORY = "Quasigroup properties"


@classifier(
    label="Latin square",
    description="Every row and column is a permutation of the elements (a quasigroup).",
    category=CATEGORY,
)
def is_latin_square(ctx: GroupCtx):
    problem = latin_violation(ctx.order, ctx.cells)
    if problem:
        return False, problem
    return True, None


@classifier(
    label="Associative",
    description="(a * b) * c = a * (b * c) for all elements.",
    category=CATEGORY,
)
def is_associative(ctx: GroupCtx):
    triple = associativity_violation(ctx)
    if triple is None:
        return True, "a group" if ctx.latin else None
    i, j, k = triple
    return False, f"Not associative. ({i} * {j}) * {k} != {i} * ({j} * {k})"


@classifier(
    label="Commutative quasigroup",
    description="Symmetric Latin square that is not a group.",
    category=CATEGORY,
)
def is_commutative_quasigroup(ctx: GroupCtx):
    if ctx.is_group or not ctx.latin:
        return False, None
    pair = commutativity_violation(ctx)
    if pair is None:
        return True, None
    a, b = pair
    return False, f"{a} * {b} != {b} * {a}"
