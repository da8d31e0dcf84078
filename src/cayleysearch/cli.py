# src/cayleysearch/cli.py

"""
Cayley Search: finite groups and quasigroups by backtracking.

Enumerates operation tables with element 1 as identity (reduced Latin
squares, group tables in ascending order, or group tables in random
order) and shows every table found as a markdown table together with its
properties, subgroups and cycle graph.

    cayleysearch                      interactive loop, last used profile
    cayleysearch random 8 --count 3   three random group tables of order 8, then exit
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import sys
import time
import traceback
from collections.abc import Callable
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

import cayleysearch.config as CONFIG
from cayleysearch.classify import classify
from cayleysearch.display import (
    next_graph_format,
    print_classifications,
    print_cycle_graph,
    print_profiles_with_descriptions,
    print_search_stats,
    print_subgroups,
    print_table,
    screen_header,
    show_classifier_list,
    show_intro_help,
)
from cayleysearch.output_manager import OutputManager, check_report_path
from cayleysearch.progress import SearchProgress
from cayleysearch.registry import Index, discover_with_report
from cayleysearch.runtime import APPLY
from cayleysearch.runtime import current as _rt_current
from cayleysearch.search import MODES, SearchEngine, make_engine
from cayleysearch.utility import (
    ConfigurationError,
    UserInputError,
    build_ctx,
    clear_screen,
    terminal_size,
)
from cayleysearch.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("init", "list", "where", "active")

EXIT_OK, EXIT_ERROR, EXIT_USAGE, EXIT_INTERRUPTED = 0, 1, 2, 130


def _report_error(message: str) -> None:
    print(f"{Fore.RED}Error:{Style.RESET_ALL} {message}", file=sys.stderr)


def _as_order(text: str) -> int | None:
    try:
        return int(text.replace("_", ""))
    except ValueError:
        return None


def _resolve_inputs(items: list[str]) -> tuple[str | None, int | None]:
    """Positionals are ``[order]``, ``[profile]`` or ``[profile, order]``."""
    if not items:
        return None, None
    order = _as_order(items[0])
    if order is not None:
        return None, order
    return items[0], (_as_order(items[1]) if len(items) > 1 else None)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cayleysearch",
        description="Enumerate finite groups and quasigroups by backtracking.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "commands:\n"
            "  init            create the workspace and copy missing packaged profiles\n"
            "  init overwrite  replace workspace profiles with the packaged ones\n"
            "                  (developers only, needs CAYLEYSEARCH_DEV=1)\n"
            "  list            list the table properties that are checked\n"
            "  where           show workspace and package locations\n"
            "  active          show the profile used last\n"
        ),
    )
    p.add_argument("items", nargs="*", metavar="profile/order",
                   help="an order, a profile name, a profile name followed by an order, or a command")
    p.add_argument("--mode", choices=sorted(MODES),
                   help="latin: reduced Latin squares; group: group tables; random: group tables in random order")
    p.add_argument("--seed", type=int, help="seed of the random mode (default: profile SEED, else the clock)")
    p.add_argument("--skip", type=int, metavar="N", help="pass over N solutions before the first one shown")
    p.add_argument("--count", type=int, metavar="N", help="show N solutions and exit instead of the interactive loop")
    p.add_argument("--graph", choices=["graphviz", "csacademy", "none"], help="cycle graph notation")
    p.add_argument("--output", metavar="FILE", help="also append every report to FILE (relative to the workspace)")
    p.add_argument("--quiet", action="store_true", help="no live status and no screen output")
    p.add_argument("--no-details", action="store_true", help="leave out classifier details")
    p.add_argument("--debug", action="store_true", help="search counters, classifier timings and tracebacks")
    return p


def main(argv: list[str] | None = None) -> int:
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _report_error(str(e))
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        if "--debug" in (sys.argv if argv is None else argv):
            raise
        print(f"Unexpected error: {type(e).__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return EXIT_ERROR


# ---- search session -----------------------------------------------------------

class SearchSession:
    """
    One engine and what the driver shows around it: the running solution
    number, the cycle graph notation and the flags that decide what is
    printed.
    """

    def __init__(self, engine: SearchEngine, index: Index, args: argparse.Namespace, graph_format: str):
        self.engine = engine
        self.index = index
        self.args = args
        self.graph_format = graph_format
        self.shown = 0

    @property
    def describe(self) -> str:
        return f"{self.engine.strategy.name} search, order {self.engine.order}"

    def skip(self, count: int) -> int:
        """Advance over ``count`` solutions without showing them; returns how many there were."""
        if count <= 0:
            return 0
        progress = SearchProgress(self.engine, count, enabled=not self.args.quiet)
        done = 0
        try:
            while done < count and self.engine.advance():
                done += 1
                progress.update(done)
        finally:
            progress.clear()
        self.shown += done
        if _rt_current().debug:
            print(f"[debug] {progress.describe(done)} in {progress.elapsed:.3f} s", file=sys.stderr)
        return done

    def next(self, om: OutputManager) -> bool:
        """Find and show the next solution. False once the search is exhausted."""
        started = time.perf_counter()
        if not self.engine.advance():
            om.write(
                f"{Fore.YELLOW}No more tables: the {self.engine.strategy.name} search of order "
                f"{self.engine.order} is exhausted after {self.shown} solution(s).{Style.RESET_ALL}"
            )
            return False
        self.shown += 1
        rt = _rt_current()
        if rt.debug:
            print_search_stats(self.engine, self.shown, time.perf_counter() - started)

        ctx = build_ctx(self.engine)
        title = f"Solution #{self.shown}: {self.describe}"
        if rt.get("DISPLAY_SETTINGS.SHOW_TABLE", True):
            print_table(ctx, title, om)
        else:
            om.write(f"{Style.BRIGHT}{Fore.CYAN}{title}{Style.RESET_ALL}")

        results = classify(ctx, index=self.index, progress=not self.args.quiet)
        print_classifications(ctx, results, show_details=not self.args.no_details, om=om, index=self.index)
        if rt.get("DISPLAY_SETTINGS.SHOW_SUBGROUPS", True):
            print_subgroups(ctx, om)
        print_cycle_graph(ctx, self.graph_format, om)
        return True

    def restart(self) -> str:
        """Reseed a random engine; rewind a deterministic one to its first table."""
        self.shown = 0
        try:
            self.engine.reseed()
        except ConfigurationError:
            self.engine.reset()
            return f"Restarted the {self.engine.strategy.name} search from the first table."
        return f"Reseeded the random search (seed {self.engine.strategy.seed})."


def _engine_for(args: argparse.Namespace, order: int | None) -> SearchEngine:
    """Command-line flags first, the profile's [SEARCH] section second."""
    search = _rt_current().search
    return make_engine(
        args.mode or search.mode,
        search.order if order is None else order,
        search.seed if args.seed is None else args.seed,
    )


def _debug_dump_profile(selected: CONFIG.Settings) -> None:
    rt = _rt_current()
    print(f"[debug] profile {rt.profile_name!r} from {selected.path}", file=sys.stderr)
    print(f"[debug] search: {rt.search}", file=sys.stderr)
    for key, value in sorted(rt.flat().items(), key=lambda kv: kv[0].lower()):
        print(f"        {key:.<50} {value!r} ({type(value).__name__})", file=sys.stderr)


def _debug_discovery(index: Index, report) -> None:
    width, height = terminal_size()
    print(f"[debug] terminal {width}x{height}, {len(index.funcs)} classifier(s)", file=sys.stderr)
    for source, count in report.loaded:
        print(f"[discovery] {Fore.GREEN}OK{Style.RESET_ALL}   {source}: {count} label(s)", file=sys.stderr)
    for source, err in report.failed:
        print(f"[discovery] {Fore.RED}FAIL{Style.RESET_ALL} {source}: {err}", file=sys.stderr)
    for label, skipped, kept in report.duplicates:
        print(f"[discovery] {Fore.YELLOW}SKIP{Style.RESET_ALL} {label!r} from {skipped} (kept {kept})",
              file=sys.stderr)


def _utf8_when_redirected() -> None:
    # a pipe on a legacy code page cannot take the box and arrow characters
    if os.environ.get("PYTHONIOENCODING") or sys.stdout.isatty():
        return
    if (sys.stdout.encoding or "").lower() in ("", "ascii", "us-ascii", "cp1252"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


# ---- main -----------------------------------------------------------------------

def _main_impl(argv: list[str] | None = None) -> int:
    colorama_init(autoreset=True)
    _utf8_when_redirected()

    parser = _build_parser()
    args = parser.parse_args(argv)
    for flag in ("skip", "count"):
        if (getattr(args, flag) or 0) < 0:
            parser.error(f"--{flag} must not be negative")

    rt = _rt_current()
    rt.debug = args.debug
    if args.debug:
        faulthandler.enable()

    ensure_workspace_seeded()
    index, report = discover_with_report(workspace_dir())
    if args.debug:
        _debug_discovery(index, report)

    profile, order = _resolve_inputs(args.items)
    if profile in COMMANDS:
        return _run_command(profile, args.items[1:], index)

    if profile and not CONFIG.has_profile(profile):
        print(f"Unknown profile: '{profile}'")
        print("Available profiles:", ", ".join(CONFIG.list_all_profiles()))
        return EXIT_USAGE
    # explicit, else last used, else default
    profile_name = profile or CONFIG.read_current_profile()
    if not CONFIG.has_profile(profile_name):
        profile_name = "default"

    selected = CONFIG.load_settings(profile_name)
    APPLY(selected)
    if args.debug:
        rt.debug = True  # the flag wins over BEHAVIOUR.DEBUG
        _debug_dump_profile(selected)

    try:
        report_file = check_report_path(args.output) or check_report_path(rt.get("OUTPUT.OUTPUT_FILE"))
    except ValueError as e:
        raise UserInputError(f"Output file: {e}") from None

    def open_output() -> OutputManager:
        return OutputManager(output_file=report_file, quiet=args.quiet)

    graph_format = args.graph or str(rt.get("DISPLAY_SETTINGS.GRAPH_FORMAT", "graphviz"))
    session = SearchSession(_engine_for(args, order), index, args, graph_format)
    if args.debug:
        print(f"[debug] engine: {session.engine!r}, report file: {report_file or '-'}", file=sys.stderr)

    session.skip(rt.search.skip if args.skip is None else args.skip)

    if args.count is not None:
        with open_output() as om:
            for _ in range(args.count):
                if not session.next(om):
                    break
        return EXIT_OK

    return Repl(session, profile_name, open_output).run()


def _run_command(command: str, rest: list[str], index: Index) -> int:
    if command == "active":
        print(f"Active profile: {CONFIG.read_current_profile()}")
    elif command == "list":
        show_classifier_list(index)
    elif command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('cayleysearch')}")
    elif rest[:1] == ["overwrite"]:
        if os.environ.get("CAYLEYSEARCH_DEV") != "1":
            print("Refusing to overwrite: set CAYLEYSEARCH_DEV=1 to enable developer overwrite.")
            return EXIT_USAGE
        root, copied = seed_workspace(overwrite=True)
        print(f"Workspace ready at: {root} (packaged profiles copied over yours: {copied['profiles']})")
    else:
        root, _, copied = ensure_workspace_seeded()
        print(f"Workspace ready at: {root} (profiles copied: {copied['profiles']})")
    return EXIT_OK


# ---- interactive loop -------------------------------------------------------------

def _toggle(attr: str, title: str) -> Callable[[list[str]], None]:
    def handler(words: list[str]) -> None:
        rt = _rt_current()
        choice = words[1] if len(words) > 1 else "status"
        if choice in ("on", "off"):
            setattr(rt, attr, choice == "on")
            print(f"{title} {'enabled' if choice == 'on' else 'disabled'} for this session.")
        elif choice == "status":
            print(f"{title} is currently {'ON' if getattr(rt, attr) else 'OFF'}.")
        else:
            print(f"Usage: {words[0]} [on|off|status]")
    return handler


class Repl:
    def __init__(self, session: SearchSession, profile_name: str, open_output: Callable[[], OutputManager]):
        self.session = session
        self.profile_name = profile_name
        self.open_output = open_output
        self.commands: dict[str, Callable[[list[str]], None]] = {
            "": self.show_next,
            "r": lambda _: print(self.session.restart()),
            "g": self.switch_graph,
            "l": lambda _: show_classifier_list(self.session.index),
            "list": lambda _: show_classifier_list(self.session.index),
            "p": lambda _: print_profiles_with_descriptions(),
            "h": self.show_help,
            "help": self.show_help,
            "debug": _toggle("debug", "Debug mode"),
            "fast": _toggle("fast_mode", "Fast mode"),
        }

    def prompt(self) -> str:
        return (f"\nProfile: {self.profile_name} [{self.session.describe}, graph {self.session.graph_format}]"
                f" Enter=next, r, g, profile (h=Help, q=Quit): ")

    def show_next(self, _words: list[str]) -> None:
        with self.open_output() as om:
            self.session.next(om)

    def show_help(self, _words: list[str]) -> None:
        show_intro_help(self.session.index, om=OutputManager())

    def switch_graph(self, _words: list[str]) -> None:
        self.session.graph_format = next_graph_format(self.session.graph_format)
        print(f"Cycle graph format: {self.session.graph_format}")

    def switch_profile(self, name: str) -> None:
        """Load ``name`` and start a fresh search from its [SEARCH] section."""
        try:
            selected = CONFIG.load_settings(name)
            APPLY(selected)
        except UserInputError as e:
            print(f"{Fore.RED}Failed to load profile{Style.RESET_ALL} '{name}': {e}", file=sys.stderr)
            return
        args = self.session.args
        args.mode = args.seed = None
        rt = _rt_current()
        engine = _engine_for(args, None)
        CONFIG.write_current_profile(name)
        self.profile_name = name
        self.session = SearchSession(engine, self.session.index, args,
                                     str(rt.get("DISPLAY_SETTINGS.GRAPH_FORMAT", "graphviz")))
        self.session.skip(rt.search.skip)
        print(f"Applied profile: {name} ({self.session.describe})")

    def handle(self, line: str) -> bool:
        """Run one input line; False means quit."""
        words = line.lower().split()
        key = words[0] if words else ""
        if key in ("q", "quit"):
            return False
        handler = self.commands.get(key)
        if handler is not None:
            handler(words)
        elif CONFIG.has_profile(line):
            self.switch_profile(line)
        else:
            print(f"{Fore.RED}Invalid input:{Style.RESET_ALL} '{line}'. Type h for help.")
        return True

    def run(self) -> int:
        if not _rt_current().debug:
            clear_screen()
        print(screen_header())
        while True:
            try:
                if not self.handle(input(self.prompt()).strip()):
                    return EXIT_OK
            except (EOFError, KeyboardInterrupt):
                print()
                return EXIT_OK
            except UserInputError as e:
                _report_error(str(e))
            except Exception as e:
                if _rt_current().debug:
                    traceback.print_exc()
                else:
                    _report_error(f"{type(e).__name__}: {e}")


if __name__ == "__main__":
    raise SystemExit(main())
