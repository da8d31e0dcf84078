# tests/test_classifiers.py
"""
Packaged property classifiers, called the way classify() calls them.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from cayleysearch.registry import discover
from cayleysearch.workspace import ensure_workspace_seeded, workspace_dir


@pytest.fixture(scope="session")
def index():
    """Seed workspace (if needed) and discover classifiers once."""
    ensure_workspace_seeded()
    return discover(workspace_dir())


def _labels_ok(index, ctx) -> set[str]:
    got = set()
    for label, fn in index.funcs.items():
        res = fn(ctx)
        ok = res[0] if isinstance(res, tuple) else res
        if ok:
            got.add(label)
    return got


# --- expected label sets per reference table ---

TEST_CASES = [
    ("C2", {"Latin square", "Associative", "Abelian group", "Cyclic group", "Simple group", "Dedekind group"}),
    ("C4", {"Latin square", "Associative", "Abelian group", "Cyclic group", "Dedekind group"}),
    ("V4", {"Latin square", "Associative", "Abelian group", "Dedekind group"}),
    ("C5", {"Latin square", "Associative", "Abelian group", "Cyclic group", "Simple group", "Dedekind group"}),
    ("S3", {"Latin square", "Associative"}),
    ("D4", {"Latin square", "Associative"}),
    ("Q8", {"Latin square", "Associative", "Dedekind group", "Hamiltonian group"}),
    ("LOOP5", {"Latin square"}),
    ("CLOOP6", {"Latin square", "Commutative quasigroup"}),
]

TEST_IDS = [name for name, _ in TEST_CASES]


@pytest.mark.parametrize("name,expected_labels", TEST_CASES, ids=TEST_IDS)
def test_classification_is_exact(index, tables, name, expected_labels):
    got = _labels_ok(index, tables[name])
    assert got == expected_labels, f"{name}: expected {sorted(expected_labels)}, got {sorted(got)}"


def test_discovery_finds_packaged_classifiers(index):
    assert len(index.funcs) >= 8
    assert index.categories["Latin square"] == "Quasigroup properties"
    assert index.categories["Hamiltonian group"] == "Group properties"
    assert index.label_to_token["Simple group"] == "SIMPLE_GROUP"
    assert index.limits["Dedekind group"] == 16


# --- details carry a witness ---

def test_non_abelian_detail(index, tables):
    ok, detail = index.funcs["Abelian group"](tables["S3"])
    assert not ok
    assert detail.startswith("Non-abelian.")


def test_not_associative_detail(index, tables):
    ok, detail = index.funcs["Associative"](tables["LOOP5"])
    assert not ok
    assert detail.startswith("Not associative. (")


def test_group_only_classifiers_refuse_loops(index, tables):
    for label in ("Abelian group", "Cyclic group", "Simple group", "Dedekind group", "Hamiltonian group"):
        ok, detail = index.funcs[label](tables["CLOOP6"])
        assert not ok
        assert detail.startswith("Not a group")


def test_simple_prime_order_detail(index, tables):
    ok, detail = index.funcs["Simple group"](tables["C5"])
    assert ok and detail == "prime order 5"


def test_dedekind_witness(index, tables):
    ok, detail = index.funcs["Dedekind group"](tables["S3"])
    assert not ok
    assert "is not normal" in detail


def test_cyclic_detail(index, tables):
    ok, detail = index.funcs["Cyclic group"](tables["V4"])
    assert not ok
    assert detail == "largest element order is 2 < 4"


def test_workspace_classifier_is_discovered(workspace):
    cls_dir = workspace / "classifiers"
    cls_dir.mkdir(parents=True, exist_ok=True)
    (cls_dir / "extra.py").write_text(
        "from cayleysearch.registry import classifier\n"
        "\n"
        "@classifier(label='Even order', category='Custom', description='Order divisible by 2.')\n"
        "def even_order(ctx):\n"
        "    return ctx.order % 2 == 0, None\n",
        encoding="utf-8",
    )
    (cls_dir / "broken.py").write_text("raise RuntimeError('boom')\n", encoding="utf-8")
    try:
        from cayleysearch.registry import discover_with_report

        idx, rep = discover_with_report(workspace)
        assert "Even order" in idx.funcs
        assert ("ws:extra.py", 1) in rep.loaded
        assert [source for source, _ in rep.failed] == ["ws:broken.py"]
        assert "Latin square" in idx.funcs
    finally:
        (cls_dir / "extra.py").unlink()
        (cls_dir / "broken.py").unlink()
