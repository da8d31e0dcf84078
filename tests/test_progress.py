# tests/test_progress.py
from __future__ import annotations

import io

from cayleysearch.progress import ERASE_LINE, SearchProgress, StatusLine
from cayleysearch.search import group_search


def test_status_line_draws_and_erases():
    out = io.StringIO()
    line = StatusLine(stream=out)
    line.show("evaluating: Cyclic group", force=True)
    line.clear()
    assert out.getvalue() == f"{ERASE_LINE}evaluating: Cyclic group{ERASE_LINE}"


def test_status_line_disabled_writes_nothing():
    out = io.StringIO()
    line = StatusLine(enabled=False, stream=out)
    line.show("anything", force=True)
    line.clear()
    assert out.getvalue() == ""


def test_status_line_throttles_redraws():
    out = io.StringIO()
    line = StatusLine(stream=out, interval=3600.0)
    line.show("first", force=True)
    line.show("second")
    assert "second" not in out.getvalue()


def test_search_progress_reports_engine_counters():
    engine = group_search(4)
    progress = SearchProgress(engine, 3, enabled=False)
    for _ in range(3):
        assert engine.advance()
    text = progress.describe(3)
    assert text.startswith("group order 4: skipped 3/3 (100%)")
    assert f"probes {engine.probes:,}" in text
    assert f"backtracks {engine.backtracks:,}" in text
    assert engine.probes > 0


def test_search_progress_final_update_is_drawn():
    out = io.StringIO()
    engine = group_search(4)
    progress = SearchProgress(engine, 2, stream=out)
    engine.advance()
    progress.update(1)
    engine.advance()
    progress.update(2)
    progress.clear()
    assert "skipped 2/2 (100%)" in out.getvalue()
    assert out.getvalue().endswith(ERASE_LINE)
