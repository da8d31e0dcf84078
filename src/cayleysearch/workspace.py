# src/cayleysearch/workspace.py
"""
The user workspace: ``$CAYLEYSEARCH_HOME``, else ``~/Documents/CayleySearch``.

    profiles/      TOML profiles, seeded from the ones shipped with the package
    classifiers/   extra ``@classifier`` modules picked up by discovery
"""

from __future__ import annotations

import os
from importlib.resources import files as pkg_files
from pathlib import Path

HOME_ENV = "CAYLEYSEARCH_HOME"
SUBDIRS = ("profiles", "classifiers")


def workspace_dir() -> Path:
    home = os.environ.get(HOME_ENV)
    base = Path(home).expanduser() if home else Path.home() / "Documents" / "CayleySearch"
    return base.resolve()


def packaged_profiles() -> list:
    folder = pkg_files("cayleysearch") / "profiles"
    return sorted((r for r in folder.iterdir() if r.name.endswith(".toml")), key=lambda r: r.name)


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, dict[str, int]]:
    """
    Create the workspace folders and copy the packaged profiles in.

    A profile already in the workspace is left alone unless ``overwrite``.
    Returns the workspace root and the number of files copied per folder.
    """
    root = workspace_dir()
    for sub in SUBDIRS:
        (root / sub).mkdir(parents=True, exist_ok=True)

    copied = dict.fromkeys(SUBDIRS, 0)
    for resource in packaged_profiles():
        target = root / "profiles" / resource.name
        if target.exists() and not overwrite:
            continue
        target.write_bytes(resource.read_bytes())
        copied["profiles"] += 1
    return root, copied


def ensure_workspace_seeded() -> tuple[Path, bool, dict[str, int]]:
    root, copied = seed_workspace()
    return root, any(copied.values()), copied
