# src/cayleysearch/display.py
"""
Everything the driver prints about a solution: the markdown table, the
property list, subgroup sub-tables and the cycle graph. Report output
goes through an OutputManager; lists and help go to the screen only.
"""

from __future__ import annotations

import sys
import textwrap
from collections.abc import Sequence
from itertools import groupby
from typing import TYPE_CHECKING

from colorama import Fore, Style

from cayleysearch import __version__
from cayleysearch.config import list_profiles_with_descriptions, read_current_profile
from cayleysearch.context import GroupCtx
from cayleysearch.cycle_graph import GRAPH_FORMATS, CycleGraph
from cayleysearch.groups import format_elements, is_subgroup_normal, subgroups
from cayleysearch.output_manager import strip_ansi
from cayleysearch.runtime import current as _rt_current
from cayleysearch.utility import clear_screen, get_terminal_width

if TYPE_CHECKING:
    from cayleysearch.classify import ClassifyResult
    from cayleysearch.output_manager import OutputManager
    from cayleysearch.registry import Index
    from cayleysearch.search import SearchEngine

# same bound the subgroup-based classifiers use in fast mode
SUBGROUP_DISPLAY_LIMIT = 16

HEADING = f"{Style.BRIGHT}{Fore.CYAN}"


def screen_header() -> str:
    return (f"{Fore.YELLOW}{Style.BRIGHT}Cayley Search v{__version__}: "
            f"finite groups and quasigroups by backtracking{Style.RESET_ALL}")


def format_seconds(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.3f} s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}:{rest:06.3f}"


def bullet(prefix: str, text: str, width: int, indent: int = 4) -> str:
    """``prefix`` + ``text`` wrapped to ``width``; continuation lines start at ``indent``."""
    room = max(10, width - len(strip_ansi(prefix)))
    first, *rest = textwrap.wrap(text, room) or [""]
    tail = " ".join(rest)
    lines = [prefix + first]
    lines += [" " * indent + ln for ln in textwrap.wrap(tail, max(10, width - indent))]
    return "\n".join(lines)


# ---------- tables -----------------------------------------------------------------

def markdown_table(ctx: GroupCtx, elements: Sequence[int] | None = None) -> str:
    """
    Markdown rendering of the table, or of its restriction to ``elements``:

        | * |1|2|
        | - |-|-|
        |**1**|1|2|
        |**2**|2|1|
    """
    elems = list(ctx.elements if elements is None else elements)
    head = "| * |" + "|".join(map(str, elems)) + "|"
    rule = "| - |" + "-|" * len(elems)
    body = [f"|**{a}**|" + "|".join(str(ctx.mul(a, b)) for b in elems) + "|" for a in elems]
    return "\n".join([head, rule, *body])


def print_table(ctx: GroupCtx, title: str, om: OutputManager) -> None:
    om.write(f"{HEADING}{title}{Style.RESET_ALL}")
    om.write(markdown_table(ctx))
    om.write()


def print_subgroups(ctx: GroupCtx, om: OutputManager) -> None:
    """Each proper nontrivial subgroup as a sub-table, marked normal or not."""
    if not ctx.is_group:
        return
    if _rt_current().fast_mode and ctx.order > SUBGROUP_DISPLAY_LIMIT:
        om.write(f"{Style.DIM}Subgroups: skipped (order {ctx.order} > {SUBGROUP_DISPLAY_LIMIT}, "
                 f"fast mode on){Style.RESET_ALL}\n")
        return

    subs = subgroups(ctx)
    om.write(f"{HEADING}Subgroups: {len(subs)}{Style.RESET_ALL}")
    if not subs:
        om.write("  (only the trivial subgroup and the group itself)\n")
        return
    for sub in subs:
        kind = "normal" if is_subgroup_normal(ctx, sub) else "not normal"
        om.write(f"  - order {len(sub)}: {format_elements(sub)} ({kind})")
    om.write()
    for sub in subs:
        om.write(markdown_table(ctx, sub) + "\n")


def print_cycle_graph(ctx: GroupCtx, fmt: str, om: OutputManager) -> None:
    key = (fmt or "none").strip().lower()
    if key == "none" or not ctx.is_group:
        return
    om.write(f"{HEADING}Cycle graph ({key}){Style.RESET_ALL}")
    om.write(CycleGraph(ctx).render(key))


def next_graph_format(fmt: str) -> str:
    """graphviz -> csacademy -> none -> graphviz; anything unknown restarts at graphviz."""
    ring = [*GRAPH_FORMATS, "none"]
    key = (fmt or "").strip().lower()
    if key not in ring:
        return ring[0]
    return ring[(ring.index(key) + 1) % len(ring)]


# ---------- classifications --------------------------------------------------------

def print_classifications(ctx: GroupCtx, results: ClassifyResult, show_details: bool = True,
                          om: OutputManager | None = None, index: Index | None = None) -> None:
    rt = _rt_current()
    width = get_terminal_width()
    descriptions = index.descriptions if index is not None else {}

    if not results.outcomes:
        om.write(f"{Style.DIM}No properties hold for this table.{Style.RESET_ALL}")

    # classify() already returns the outcomes grouped by category
    for n, (category, items) in enumerate(groupby(results.outcomes, key=lambda o: o.category)):
        if n:
            om.write()
        om.write(f"{HEADING}{category}{Style.RESET_ALL}")
        for o in items:
            om.write(bullet(f"{Fore.WHITE}  - {o.label}:{Style.RESET_ALL} ", descriptions.get(o.label, ""), width))
            if show_details and o.detail:
                om.write(f"{Fore.GREEN}{Style.BRIGHT}    Details: {o.detail}{Style.RESET_ALL}")

    if results.skipped and rt.get("DISPLAY_SETTINGS.SHOW_SKIPPED", True):
        om.write(f"\n{Fore.RED}{Style.BRIGHT}Skipped classifications: {len(results.skipped)} "
                 f"(limits or errors){Style.RESET_ALL}")
        for line in sorted(results.skipped):
            om.write(f"{Style.DIM}  - {line}{Style.RESET_ALL}")
    om.write()


def print_search_stats(engine: SearchEngine, number: int, elapsed: float) -> None:
    """[debug] counters for one solution, plus the cell and track dump for small orders."""
    print(
        f"[debug] solution #{number}: {engine.strategy.name} order {engine.order}, "
        f"{format_seconds(elapsed)}, probes={engine.probes}, backtracks={engine.backtracks}",
        file=sys.stderr,
    )
    if engine.order <= SUBGROUP_DISPLAY_LIMIT:
        print(f"{Style.DIM}{engine.as_text(show_track=True)}{Style.RESET_ALL}", file=sys.stderr)


# ---------- lists and help -----------------------------------------------------------

def show_classifier_list(index: Index) -> None:
    print(screen_header())
    print(f"\n{Fore.YELLOW}Available classifiers: {len(index.funcs)}{Style.RESET_ALL}\n")
    by_category = sorted(index.funcs, key=lambda lbl: (index.categories.get(lbl, "").casefold(), lbl.casefold()))
    for category, labels in groupby(by_category, key=lambda lbl: index.categories.get(lbl, "")):
        print(f"{Fore.CYAN}{category or 'Uncategorized'}:{Style.RESET_ALL}")
        for lbl in labels:
            entry = f"  {Fore.GREEN}{lbl}{Style.RESET_ALL} [{index.label_to_token.get(lbl, '')}]"
            desc = index.descriptions.get(lbl)
            print(f"{entry}: {desc}" if desc else entry)
        print()


HELP_TEXT = """\
{green}Welcome to Cayley Search{reset}
------------------------------------------------------------------------------
Enumerate operation tables with element 1 as identity by backtracking:

 * latin   every reduced Latin square (quasigroup with identity) of the order.
 * group   every labelled group table, associativity pruned while filling.
 * random  group tables in random order; reseed to start a new walk.

Each table is classified ({count} classifiers) and shown with its subgroups
and a cycle graph in Graphviz or CS Academy notation.

{magenta}Interactive commands:{reset}
   Enter               show the next table.
   r                   reseed the random search, or restart a deterministic one.
   g                   switch cycle graph format (graphviz, csacademy, none).
   l                   list all classifiers.
   p                   show the available profiles.
   debug on|off|status switch debug mode or show its state.
   fast on|off|status  switch fast mode (per-classifier order limits).
   h or help           show this help.
   q or quit           quit.

 * Enter a profile name to switch to it; the search starts over.
 * Press Ctrl-C during classification to skip a slow classifier.
 * For command-line options, run: cayleysearch -h
"""


def show_intro_help(index: Index, om: OutputManager) -> None:
    clear_screen()
    om.write(screen_header())
    om.write(HELP_TEXT.format(
        green=Fore.GREEN, magenta=Fore.MAGENTA + Style.BRIGHT, reset=Style.RESET_ALL, count=len(index.funcs),
    ))


def print_profiles_with_descriptions() -> None:
    pairs = list_profiles_with_descriptions()
    active = read_current_profile()
    print("\nAvailable profiles:")
    if not pairs:
        print("  (none)")
    for name, desc in pairs:
        marker = "→" if name == active else " "
        print(f"  {marker} {name:13} {desc}")
