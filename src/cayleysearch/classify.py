# src/cayleysearch/classify.py
"""
Run the registered table properties against one ``GroupCtx``.

Which properties run is decided by the active profile:

    [CATEGORIES]   "Group properties" = false   switches a whole category off
    [CLASSIFIERS]  SIMPLE_GROUP = false         switches one property off;
                                                any `true` turns the section into an allowlist

In fast mode a property whose order limit is below the table order is
skipped. So is a property that raises or is interrupted with Ctrl-C; a
failed check is reported, never counted as a hit.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from colorama import Fore, Style

from cayleysearch.context import GroupCtx
from cayleysearch.progress import StatusLine
from cayleysearch.registry import Index, property_info, token_for
from cayleysearch.runtime import current as _rt_current

UNCATEGORIZED = "Uncategorized"


@dataclass
class Outcome:
    label: str
    category: str
    ok: bool
    detail: str | None


@dataclass
class ClassifyResult:
    outcomes: list[Outcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def labels(self) -> set[str]:
        return {o.label for o in self.outcomes}


@dataclass(frozen=True)
class Selection:
    categories: dict[str, bool]
    tokens: dict[str, bool]

    @classmethod
    def from_runtime(cls) -> Selection:
        rt = _rt_current()
        cats = rt.get("CATEGORIES") or {}
        toks = rt.get("CLASSIFIERS") or {}
        return cls(
            categories={str(k): v for k, v in cats.items() if isinstance(v, bool)},
            tokens={str(k).upper(): v for k, v in toks.items() if isinstance(v, bool)},
        )

    def allows(self, category: str, token: str) -> bool:
        if not self.categories.get(category, True):
            return False
        if any(self.tokens.values()):
            return self.tokens.get(token, False)
        return self.tokens.get(token, True)


def _order_limit(index: Index, label: str, fn: Callable) -> int | None:
    if label in index.limits:
        return index.limits[label]
    info = property_info(fn)
    return info.limit if info else None


def _as_pair(result: Any) -> tuple[bool, str | None]:
    if isinstance(result, tuple):
        ok = bool(result[0]) if result else False
        return ok, (result[1] if len(result) > 1 else None)
    return bool(result), None


_BADGES = {
    "OK": f"{Fore.GREEN}{Style.BRIGHT}OK  ",
    "NO": f"{Style.DIM}NO  ",
    "SKIP": f"{Fore.YELLOW}{Style.BRIGHT}SKIP",
    "ERR": f"{Fore.RED}{Style.BRIGHT}ERR ",
}


def _debug_line(label: str, status: str, ms: float, note: str | None = None) -> None:
    line = f"{Style.DIM}[{ms:7.2f} ms]{Style.RESET_ALL} {_BADGES[status]}{Style.RESET_ALL}  {label}"
    if note:
        line += f"  {Style.DIM}({note}){Style.RESET_ALL}"
    print(line, file=sys.stderr)


def classify(ctx: GroupCtx, index: Index, progress: bool = True) -> ClassifyResult:
    """Evaluate the enabled properties, grouped by category (alphabetical), discovery order within."""
    rt = _rt_current()
    keep_details = rt.get("DISPLAY_SETTINGS.SHOW_CLASSIFIER_DETAILS", True)
    selection = Selection.from_runtime()
    status = StatusLine(enabled=progress and not rt.debug)

    def category_of(label: str) -> str:
        return index.categories.get(label) or UNCATEGORIZED

    labels = sorted(
        (lbl for lbl in index.funcs
         if selection.allows(category_of(lbl), index.label_to_token.get(lbl) or token_for(lbl))),
        key=lambda lbl: category_of(lbl).casefold(),
    )

    result = ClassifyResult()
    heading = None
    try:
        for label in labels:
            fn, category = index.funcs[label], category_of(label)
            if rt.debug and category != heading:
                heading = category
                print(f"\n{Fore.YELLOW}{Style.BRIGHT}{category}{Style.RESET_ALL}", file=sys.stderr)

            limit = _order_limit(index, label, fn)
            if rt.fast_mode and limit is not None and ctx.order > limit:
                reason = f"order {ctx.order} > {limit}"
                result.skipped.append(f"{label}: {reason}")
                if rt.debug:
                    _debug_line(label, "SKIP", 0.0, reason)
                continue

            status.show(f" ⏳ evaluating: {label}  (Ctrl-C to skip)", force=True)
            started = time.perf_counter()
            try:
                ok, detail = _as_pair(fn(ctx))
            except KeyboardInterrupt:
                result.skipped.append(f"{label}: aborted by user (Ctrl-C)")
                if rt.debug:
                    _debug_line(label, "SKIP", 0.0, "KeyboardInterrupt")
                continue
            except Exception as e:
                result.skipped.append(f"{label}: {e}")
                if rt.debug:
                    ms = (time.perf_counter() - started) * 1000.0
                    _debug_line(label, "ERR", ms, f"{type(e).__name__}: {e}")
                continue

            if rt.debug:
                _debug_line(label, "OK" if ok else "NO", (time.perf_counter() - started) * 1000.0, detail)
            if ok:
                result.outcomes.append(Outcome(label, category, True, detail if keep_details else None))
    finally:
        status.clear()

    return result
