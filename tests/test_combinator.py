# tests/test_combinator.py
from __future__ import annotations

from math import comb

import pytest

from cayleysearch.combinator import Combinator


def test_five_choose_two_sequence():
    combi = Combinator(5, 2)
    v = [0, 0]
    got = []
    while combi.next(v):
        got.append(tuple(v))
    assert got == [
        (0, 1), (0, 2), (0, 3), (0, 4),
        (1, 2), (1, 3), (1, 4),
        (2, 3), (2, 4),
        (3, 4),
    ]
    # exhausted: stays exhausted and leaves the buffer alone
    assert combi.next(v) is False
    assert v == [3, 4]


@pytest.mark.parametrize("n,k", [(1, 1), (4, 2), (6, 3), (8, 4), (10, 1), (7, 7)], ids=lambda x: str(x))
def test_counts_match_binomial(n, k):
    combos = list(Combinator(n, k))
    assert len(combos) == comb(n, k) == len(Combinator(n, k))
    assert len(set(combos)) == len(combos)
    assert combos == sorted(combos)
    for c in combos:
        assert list(c) == sorted(set(c))
        assert all(0 <= i < n for i in c)


def test_k_larger_than_n_yields_nothing():
    assert list(Combinator(3, 4)) == []
    assert len(Combinator(3, 4)) == 0
