# tests/conftest.py
from __future__ import annotations

import os

import pytest
from sympy.combinatorics.named_groups import AbelianGroup, CyclicGroup, DihedralGroup, SymmetricGroup

from cayleysearch.utility import build_ctx

# ---------- reference tables ---------------------------------------------------


def cayley_rows(group) -> list[list[int]]:
    """Operation table of a sympy permutation group, identity labelled 1."""
    elements = list(group.generate())
    elements.sort(key=lambda p: not p.is_Identity)  # stable: identity first
    return [[elements.index(a * b) + 1 for b in elements] for a in elements]


def _qmul(p, q):
    a1, b1, c1, d1 = p
    a2, b2, c2, d2 = q
    return (
        a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2,
        a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2,
        a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2,
        a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2,
    )


def quaternion_rows() -> list[list[int]]:
    """Q8 as 1, -1, i, -i, j, -j, k, -k."""
    units = [(1, 0, 0, 0), (0, 1, 0, 0), (0, 0, 1, 0), (0, 0, 0, 1)]
    elements = []
    for u in units:
        elements.append(u)
        elements.append(tuple(-c for c in u))
    return [[elements.index(_qmul(a, b)) + 1 for b in elements] for a in elements]


# Non-commutative loop of order 5 (2 * 2 = 1, so not a group)
LOOP5 = [
    [1, 2, 3, 4, 5],
    [2, 1, 4, 5, 3],
    [3, 5, 1, 2, 4],
    [4, 3, 5, 1, 2],
    [5, 4, 2, 3, 1],
]

# Commutative loop of order 6 with x * x = 1 everywhere (a 1-factorization of K6)
COMMUTATIVE_LOOP6 = [
    [1, 2, 3, 4, 5, 6],
    [2, 1, 5, 3, 6, 4],
    [3, 5, 1, 6, 4, 2],
    [4, 3, 6, 1, 2, 5],
    [5, 6, 4, 2, 1, 3],
    [6, 4, 2, 5, 3, 1],
]


# ---------- session bootstrap -------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def workspace(tmp_path_factory):
    """Point the workspace at a temporary directory for the whole session."""
    root = tmp_path_factory.mktemp("cayleysearch_home")
    old = os.environ.get("CAYLEYSEARCH_HOME")
    os.environ["CAYLEYSEARCH_HOME"] = str(root)
    yield root
    if old is None:
        os.environ.pop("CAYLEYSEARCH_HOME", None)
    else:
        os.environ["CAYLEYSEARCH_HOME"] = old


@pytest.fixture(scope="session")
def tables():
    return {
        "C2": build_ctx(cayley_rows(CyclicGroup(2))),
        "C4": build_ctx(cayley_rows(CyclicGroup(4))),
        "V4": build_ctx(cayley_rows(AbelianGroup(2, 2))),
        "C5": build_ctx(cayley_rows(CyclicGroup(5))),
        "C6": build_ctx(cayley_rows(CyclicGroup(6))),
        "S3": build_ctx(cayley_rows(SymmetricGroup(3))),
        "D4": build_ctx(cayley_rows(DihedralGroup(4))),
        "Q8": build_ctx(quaternion_rows()),
        "LOOP5": build_ctx(LOOP5),
        "CLOOP6": build_ctx(COMMUTATIVE_LOOP6),
    }
