# -----------------------------------------------------------------------------
#  group_properties.py
#  Group-theoretic properties of a completed, associative table.
# -----------------------------------------------------------------------------

from __future__ import annotations

from sympy import isprime

from cayleysearch.context import GroupCtx
from cayleysearch.groups import (
    commutativity_violation,
    element_order,
    format_elements,
    generator,
    normal_subgroups,
    normality_witness,
    subgroups,
)
from cayleysearch.registry import classifier

CATEGORY = "Group properties"

# subgroup enumeration walks C(n, n/2) subsets at the top divisor
SUBGROUP_LIMIT = 16

NOT_A_GROUP = "Not a group (the operation is not associative)."


@classifier(
    label="Abelian group",
    description="a * b = b * a for all elements.",
    category=CATEGORY,
)
def is_abelian_group(ctx: GroupCtx):
    if not ctx.is_group:
        return False, NOT_A_GROUP
    pair = commutativity_violation(ctx)
    if pair is None:
        return True, None
    a, b = pair
    return False, f"Non-abelian. {a} * {b} != {b} * {a}"


@classifier(
    label="Cyclic group",
    description="Generated by the powers of a single element.",
    category=CATEGORY,
)
def is_cyclic_group(ctx: GroupCtx):
    if not ctx.is_group:
        return False, NOT_A_GROUP
    g = generator(ctx)
    if g is not None:
        return True, f"generated by {g}"
    top = max(element_order(ctx, e) for e in ctx.elements)
    return False, f"largest element order is {top} < {ctx.order}"


@classifier(
    label="Simple group",
    description="No normal subgroup other than the trivial group and itself.",
    category=CATEGORY,
    limit=SUBGROUP_LIMIT,
)
def is_simple_group(ctx: GroupCtx):
    """
    Prime-order groups qualify (they have no proper nontrivial subgroups at all),
    same as in standard group theory.
    """
    if not ctx.is_group:
        return False, NOT_A_GROUP
    normals = normal_subgroups(ctx)
    if normals:
        return False, f"normal subgroup {format_elements(normals[0])}"
    if isprime(ctx.order):
        return True, f"prime order {ctx.order}"
    return True, "no proper nontrivial normal subgroup"


@classifier(
    label="Dedekind group",
    description="Every subgroup is normal.",
    category=CATEGORY,
    limit=SUBGROUP_LIMIT,
)
def is_dedekind_group(ctx: GroupCtx):
    if not ctx.is_group:
        return False, NOT_A_GROUP
    subs = subgroups(ctx)
    for s in subs:
        witness = normality_witness(ctx, s)
        if witness is not None:
            g, n, conj = witness
            return False, f"{format_elements(s)} is not normal: {g} * {n} * {g}⁻¹ = {conj}"
    return True, f"all {len(subs)} proper nontrivial subgroups are normal"


@classifier(
    label="Hamiltonian group",
    description="Non-abelian group in which every subgroup is normal.",
    category=CATEGORY,
    limit=SUBGROUP_LIMIT,
)
def is_hamiltonian_group(ctx: GroupCtx):
    if not ctx.is_group:
        return False, NOT_A_GROUP
    if commutativity_violation(ctx) is None:
        return False, "abelian"
    ok, detail = is_dedekind_group(ctx)
    if not ok:
        return False, detail
    return True, None
