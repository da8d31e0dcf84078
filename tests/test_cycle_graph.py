# tests/test_cycle_graph.py
from __future__ import annotations

import pytest

from cayleysearch.cycle_graph import CycleGraph
from cayleysearch.utility import InvariantViolation, build_ctx


def _cyclic_rows(n: int) -> list[list[int]]:
    return [[(i + j) % n + 1 for j in range(n)] for i in range(n)]


KLEIN = [[1, 2, 3, 4], [2, 1, 4, 3], [3, 4, 1, 2], [4, 3, 2, 1]]


def test_c4_draws_one_cycle():
    g = CycleGraph(build_ctx(_cyclic_rows(4)))
    assert g.cycles == {3: [[2, 3, 4], [4, 3, 2]], 1: [[3]]}
    assert list(g.drawn_cycles()) == [[2, 3, 4]]


def test_c4_graphviz():
    out = CycleGraph(build_ctx(_cyclic_rows(4))).render("graphviz")
    lines = out.splitlines()
    assert lines[0] == "strict graph Group {"
    assert lines[-1] == "}"
    assert [ln for ln in lines if "--" in ln] == ["    1 -- 2 -- 3 -- 4 -- 1"]


def test_c4_csacademy():
    out = CycleGraph(build_ctx(_cyclic_rows(4))).render("csacademy")
    assert out == "1 2\n2 3\n3 4\n4 1\n\n"


def test_klein_csacademy():
    out = CycleGraph(build_ctx(KLEIN)).csacademy()
    assert out == "1 2\n2 1\n\n1 3\n3 1\n\n1 4\n4 1\n\n"


def test_c6_single_generator_cycle():
    g = CycleGraph(build_ctx(_cyclic_rows(6)))
    assert list(g.drawn_cycles()) == [[2, 3, 4, 5, 6]]


def test_s3_cycles(tables):
    drawn = list(CycleGraph(tables["S3"]).drawn_cycles())
    assert sorted(len(c) for c in drawn) == [1, 1, 1, 2]
    covered = {e for c in drawn for e in c}
    assert covered == {2, 3, 4, 5, 6}


def test_non_associative_table_rejected(tables):
    with pytest.raises(InvariantViolation):
        CycleGraph(tables["LOOP5"])


def test_unknown_format():
    with pytest.raises(ValueError):
        CycleGraph(build_ctx(KLEIN)).render("dot")
