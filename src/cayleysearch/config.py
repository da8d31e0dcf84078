# src/cayleysearch/config.py
"""
Profiles are TOML files in ``<workspace>/profiles``.

An optional ``[_PROFILE_]`` table holds metadata (name, description) and
is not part of the settings. ``[SEARCH]`` is checked when the profile is
loaded, so a bad mode or seed is reported up front instead of in the
middle of a search. The last profile used is remembered in
``profiles/.current``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from cayleysearch.search import MODES
from cayleysearch.utility import UserInputError
from cayleysearch.workspace import ensure_workspace_seeded, workspace_dir

META_SECTION = "_PROFILE_"
SWITCH_SECTIONS = ("CATEGORIES", "CLASSIFIERS")


@dataclass(frozen=True)
class SearchSettings:
    """The ``[SEARCH]`` section. ``seed=None`` seeds the random mode from the clock."""
    mode: str = "group"
    order: int = 6
    seed: int | None = None
    skip: int = 0


@dataclass
class Settings:
    name: str
    description: str
    data: dict[str, Any]
    search: SearchSettings = field(default_factory=SearchSettings)
    path: Path | None = None


def _integer(section: Mapping[str, Any], key: str, default: int, where: str) -> int:
    value = section.get(key, default)
    # bool is an int subclass; a TOML `true` is never a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise UserInputError(f"{where}: SEARCH.{key} must be an integer, not {value!r}.")
    return value


def parse_search(section: Mapping[str, Any] | None, where: str = "profile") -> SearchSettings:
    """
    Validate a ``[SEARCH]`` mapping.

    SEED: missing or "" means "seed from the clock"; any integer, 0 included,
    is used as given.
    """
    section = section or {}
    mode = str(section.get("MODE", "group")).strip().lower()
    if mode not in MODES:
        raise UserInputError(f"{where}: SEARCH.MODE must be one of {', '.join(MODES)}, not {mode!r}.")
    raw_seed = section.get("SEED", "")
    seed = None if raw_seed == "" else _integer(section, "SEED", 0, where)
    skip = _integer(section, "SKIP", 0, where)
    if skip < 0:
        raise UserInputError(f"{where}: SEARCH.SKIP must not be negative.")
    return SearchSettings(mode=mode, order=_integer(section, "ORDER", 6, where), seed=seed, skip=skip)


# --- files -------------------------------------------------------------------

def profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return toml.loads(path.read_text(encoding="utf-8"))
    except toml.TOMLDecodeError as e:
        # the decoder message already names line and column
        raise UserInputError(f"reading {path.name}: {e}") from None


def _metadata(raw: Mapping[str, Any], fallback: str) -> tuple[str, str]:
    meta = raw.get(META_SECTION) or {}
    name = str(meta.get("name") or fallback)
    description = " ".join(str(meta.get("description") or "").split())
    return name, description or "(no description)"


# --- public API ----------------------------------------------------------------

def list_all_profiles() -> list[str]:
    ensure_workspace_seeded()
    return sorted(p.stem for p in profiles_dir().glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    pairs = []
    for path in profiles_dir().glob("*.toml"):
        try:
            pairs.append(_metadata(_read_toml(path), path.stem))
        except UserInputError:
            pairs.append((path.stem, "(unreadable)"))
    return sorted(pairs, key=lambda pair: pair[0].casefold())


def has_profile(name: str | None) -> bool:
    return bool(name) and (profiles_dir() / f"{name}.toml").is_file()


def load_settings(name: str | None = None) -> Settings:
    name = name or "default"
    path = profiles_dir() / f"{name}.toml"
    if not path.is_file():
        raise UserInputError(f"Profile '{name}' not found at {path}")

    raw = _read_toml(path)
    resolved, description = _metadata(raw, path.stem)
    data = {section: body for section, body in raw.items() if section != META_SECTION}
    for section in SWITCH_SECTIONS:
        data[section] = {str(k): v for k, v in (data.get(section) or {}).items() if isinstance(v, bool)}

    return Settings(
        name=resolved,
        description=description,
        data=data,
        search=parse_search(data.get("SEARCH"), where=path.name),
        path=path,
    )


def _marker() -> Path:
    return profiles_dir() / ".current"


def read_current_profile() -> str | None:
    try:
        text = _marker().read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return text.removesuffix(".toml") or None


def write_current_profile(name: str) -> None:
    marker = _marker()
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.write_text(name.strip().removesuffix(".toml"), encoding="utf-8")
