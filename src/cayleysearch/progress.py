# src/cayleysearch/progress.py
"""
Live one-line status on stdout.

``StatusLine`` redraws a single terminal line (throttled) and erases it
when done; the classifier runner uses it to name the property being
evaluated. ``SearchProgress`` shows how far ``--skip`` got together with
the engine's own probe and backtrack counters.
"""

from __future__ import annotations

import sys
import time
from typing import TYPE_CHECKING

from cayleysearch.utility import get_terminal_width

if TYPE_CHECKING:
    from cayleysearch.search import SearchEngine

ERASE_LINE = "\r\x1b[2K"


class StatusLine:
    def __init__(self, *, enabled: bool = True, interval: float = 0.05, stream=None):
        self.enabled = enabled
        self.interval = interval
        self.stream = stream if stream is not None else sys.stdout
        self._drawn_at = 0.0
        self._visible = False

    def show(self, text: str, *, force: bool = False) -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        if not force and now - self._drawn_at < self.interval:
            return
        self._drawn_at = now
        cols = max(20, get_terminal_width()) - 1
        if len(text) > cols:
            text = text[: cols - 1] + "…"
        self.stream.write(ERASE_LINE + text)
        self.stream.flush()
        self._visible = True

    def clear(self) -> None:
        if self._visible:
            self.stream.write(ERASE_LINE)
            self.stream.flush()
            self._visible = False


class SearchProgress(StatusLine):
    """Progress of passing over ``target`` solutions of one engine."""

    SPINNER = "|/-\\"

    def __init__(self, engine: SearchEngine, target: int, *, enabled: bool = True, stream=None):
        super().__init__(enabled=enabled, stream=stream)
        self.engine = engine
        self.target = max(1, int(target))
        self.started = time.perf_counter()
        self._turn = 0

    def describe(self, done: int) -> str:
        e = self.engine
        pct = 100 * min(done, self.target) // self.target
        return (
            f"{e.strategy.name} order {e.order}: skipped {done}/{self.target} ({pct}%), "
            f"probes {e.probes:,}, backtracks {e.backtracks:,}"
        )

    def update(self, done: int) -> None:
        self._turn = (self._turn + 1) % len(self.SPINNER)
        self.show(f"[{self.SPINNER[self._turn]}] {self.describe(done)}", force=done >= self.target)

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started
