# src/cayleysearch/output_manager.py
"""
Screen and report-file output for one shown solution.

An ``OutputManager`` echoes to the screen unless quiet, keeps what was
written in memory and appends it without ANSI colors to the report file
when one is set. Relative report paths are placed under the workspace.

    with OutputManager(output_file="reports/order6.md") as om:
        om.write("Solution #1")
"""

from __future__ import annotations

import re
from pathlib import Path

from cayleysearch.workspace import workspace_dir

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

# reports must never clobber project files or Windows device names
RESERVED_NAMES = frozenset(
    {".gitignore", "license", "pyproject.toml", "con", "prn", "aux", "nul"}
    | {f"com{i}" for i in range(1, 10)}
    | {f"lpt{i}" for i in range(1, 10)}
)
FORBIDDEN_SUFFIXES = frozenset({".py", ".toml"})


def strip_ansi(text: str | None) -> str:
    return ANSI_RE.sub("", text or "")


def check_report_path(path: str | None) -> str | None:
    """Return ``path`` if it may be used as a report file; raise ValueError otherwise."""
    if not path:
        return None
    if path.endswith(("/", "\\")):
        raise ValueError("Output must be a file, not a directory")
    p = Path(path)
    if p.name.lower() in RESERVED_NAMES or p.stem.lower() in RESERVED_NAMES:
        raise ValueError(f"Forbidden output filename: {p.name}")
    if p.suffix.lower() in FORBIDDEN_SUFFIXES:
        raise ValueError(f"Forbidden output file extension: {p.suffix.lower()}")
    return path


def resolve_report_path(path: str, root: Path | None = None) -> Path:
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = (root or workspace_dir()) / p
    return p.resolve()


class OutputManager:
    def __init__(self, output_file: str | None = None, quiet: bool = False):
        self.quiet = quiet
        self.path = resolve_report_path(output_file) if output_file else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._chunks: list[str] = []

    def write(self, *parts, sep: str = " ", end: str = "\n") -> None:
        text = sep.join(str(p) for p in parts) + end
        self._chunks.append(text)
        if not self.quiet:
            print(text, end="")
        if self.path is not None:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(strip_ansi(text))

    def getvalue(self) -> str:
        """Everything written so far, colors included."""
        return "".join(self._chunks)

    def close(self) -> None:
        # blank line between two reports in the same file
        if self.path is not None and self._chunks:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write("\n")

    def __enter__(self) -> OutputManager:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
