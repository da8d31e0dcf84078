# tests/test_cli.py
"""
Driver and rendering: one-shot runs, report file, markdown tables.

Run: pytest -v
"""

from __future__ import annotations

import argparse

import pytest

from cayleysearch.classify import ClassifyResult, Outcome
from cayleysearch.cli import _engine_for, _resolve_inputs, main
from cayleysearch.display import markdown_table, next_graph_format, print_classifications
from cayleysearch.output_manager import OutputManager, check_report_path, resolve_report_path
from cayleysearch.runtime import APPLY
from cayleysearch.search import random_group_search
from cayleysearch.utility import build_ctx

KLEIN = [[1, 2, 3, 4], [2, 1, 4, 3], [3, 4, 1, 2], [4, 3, 2, 1]]


# ---------- rendering ---------------------------------------------------------


def test_markdown_table():
    ctx = build_ctx([[1, 2], [2, 1]])
    assert markdown_table(ctx) == "| * |1|2|\n| - |-|-|\n|**1**|1|2|\n|**2**|2|1|"


def test_markdown_subtable():
    ctx = build_ctx(KLEIN)
    assert markdown_table(ctx, (1, 3)) == "| * |1|3|\n| - |-|-|\n|**1**|1|3|\n|**3**|3|1|"


def test_graph_format_toggle():
    assert next_graph_format("graphviz") == "csacademy"
    assert next_graph_format("csacademy") == "none"
    assert next_graph_format("none") == "graphviz"
    assert next_graph_format("bogus") == "graphviz"


def test_print_classifications_plain_text():
    APPLY({"CATEGORIES": {"Group properties": True}, "DISPLAY_SETTINGS": {"SHOW_SKIPPED": True}})
    res = ClassifyResult(
        outcomes=[Outcome("Cyclic group", "Group properties", True, "generated by 2")],
        skipped=["Simple group: order 18 > 16"],
    )
    om = OutputManager(quiet=True)
    print_classifications(build_ctx(KLEIN), res, show_details=True, om=om, index=None)
    text = om.getvalue()
    assert "Group properties" in text
    assert "  - Cyclic group:" in text
    assert "Details: generated by 2" in text
    assert "Skipped classifications: 1" in text
    assert "Simple group: order 18 > 16" in text


# ---------- argument handling -----------------------------------------------------


def test_resolve_inputs():
    assert _resolve_inputs([]) == (None, None)
    assert _resolve_inputs(["6"]) == (None, 6)
    assert _resolve_inputs(["random"]) == ("random", None)
    assert _resolve_inputs(["random", "8"]) == ("random", 8)


# ---------- one-shot runs ---------------------------------------------------------


def test_one_shot_writes_report(workspace):
    rc = main(["default", "4", "--count", "2", "--quiet", "--output", "reports/order4.md"])
    assert rc == 0
    report = (workspace / "reports" / "order4.md").read_text(encoding="utf-8")
    assert "Solution #1: group search, order 4" in report
    assert "Solution #2: group search, order 4" in report
    assert "| * |1|2|3|4|" in report
    assert "strict graph Group {" in report
    assert "\x1b[" not in report


def test_one_shot_reports_exhaustion(workspace):
    rc = main(["default", "3", "--count", "3", "--quiet", "--output", "reports/order3.md"])
    assert rc == 0
    report = (workspace / "reports" / "order3.md").read_text(encoding="utf-8")
    assert "Solution #1" in report
    assert "exhausted after 1 solution(s)" in report


def test_one_shot_skip(workspace):
    rc = main(["quasigroups", "4", "--skip", "3", "--count", "1", "--quiet", "--output", "reports/skip.md"])
    assert rc == 0
    report = (workspace / "reports" / "skip.md").read_text(encoding="utf-8")
    assert "Solution #4: latin search, order 4" in report


def test_bad_order_exits_2(capsys):
    assert main(["default", "1", "--count", "1", "--quiet"]) == 2
    assert "Invalid order value 1" in capsys.readouterr().err


def test_unknown_profile_exits_2(capsys):
    assert main(["no_such_profile", "4", "--count", "1"]) == 2
    assert "Unknown profile" in capsys.readouterr().out


def test_forbidden_output_file(capsys):
    assert main(["default", "4", "--count", "1", "--quiet", "--output", "evil.py"]) == 2
    assert "Forbidden output file extension" in capsys.readouterr().err


# ---------- search settings and report paths ----------------------------------------


def _flags(**overrides):
    values = {"mode": None, "seed": None}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_profile_seed_zero_reaches_the_engine():
    APPLY({"SEARCH": {"MODE": "random", "ORDER": 5, "SEED": 0}})
    engine = _engine_for(_flags(), None)
    assert engine.strategy.seed == 0
    assert list(engine.solutions(limit=3)) == list(random_group_search(5, 0).solutions(limit=3))


def test_flags_override_profile_search():
    APPLY({"SEARCH": {"MODE": "random", "ORDER": 5, "SEED": 0}})
    engine = _engine_for(_flags(mode="random", seed=9), 6)
    assert (engine.order, engine.strategy.seed) == (6, 9)
    engine = _engine_for(_flags(mode="latin"), None)
    assert (engine.strategy.name, engine.order) == ("latin", 5)


def test_report_path_rules(workspace):
    assert check_report_path(None) is None
    assert check_report_path("reports/order6.md") == "reports/order6.md"
    for bad in ("reports/", "pyproject.toml", "nul.txt", "setup.py"):
        with pytest.raises(ValueError):
            check_report_path(bad)
    assert resolve_report_path("reports/a.md") == (workspace / "reports" / "a.md").resolve()


def test_output_manager_strips_colors_in_file(workspace):
    with OutputManager(output_file="reports/colors.md", quiet=True) as om:
        om.write("\x1b[36mSolution\x1b[0m", 1)
    assert om.getvalue() == "\x1b[36mSolution\x1b[0m 1\n"
    assert (workspace / "reports" / "colors.md").read_text(encoding="utf-8") == "Solution 1\n\n"
