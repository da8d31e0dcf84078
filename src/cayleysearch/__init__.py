from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("cayleysearch")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .classify import classify
from .combinator import Combinator
from .config import has_profile, load_settings, read_current_profile
from .context import GroupCtx
from .cycle_graph import CycleGraph
from .registry import discover
from .runtime import APPLY, CFG
from .search import SearchEngine, group_search, latin_search, make_engine, random_group_search
from .utility import ConfigurationError, InvariantViolation, UserInputError, build_ctx
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "Combinator",
    "ConfigurationError",
    "CycleGraph",
    "GroupCtx",
    "InvariantViolation",
    "SearchEngine",
    "UserInputError",
    "__version__",
    "build_ctx",
    "classify",
    "discover",
    "group_search",
    "has_profile",
    "latin_search",
    "load_settings",
    "make_engine",
    "random_group_search",
    "read_current_profile",
    "workspace_dir",
]
