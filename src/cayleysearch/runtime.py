# src/cayleysearch/runtime.py
"""
Session state: the active profile's sections, its parsed ``[SEARCH]``
block and the two switches the interactive loop can flip (debug and
fast mode). One ``Runtime`` per context, reached through ``current()``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from cayleysearch.config import SearchSettings, Settings, parse_search


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    search: SearchSettings = field(default_factory=SearchSettings)
    debug: bool = False
    fast_mode: bool = True   # honour per-classifier order limits

    def apply(self, settings: Settings | Mapping[str, Any]) -> None:
        """Install a loaded profile, or a bare ``{section: {key: value}}`` mapping."""
        if isinstance(settings, Settings):
            self.profile_name = settings.name
            self.settings = dict(settings.data)
            self.search = settings.search
        else:
            self.profile_name = "(inline)"
            self.settings = dict(settings)
            self.search = parse_search(self.settings.get("SEARCH"), where="settings")

        behaviour = self.settings.get("BEHAVIOUR") or {}
        if isinstance(behaviour.get("DEBUG"), bool):
            self.debug = behaviour["DEBUG"]
        if isinstance(behaviour.get("FAST_MODE"), bool):
            self.fast_mode = behaviour["FAST_MODE"]

    def get(self, key: str, default: Any = None) -> Any:
        """``get("DISPLAY_SETTINGS.GRAPH_FORMAT")`` walks one section level per dot."""
        node: Any = self.settings
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def flat(self) -> dict[str, Any]:
        """Every leaf setting under its dotted key."""
        def walk(prefix: str, node: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
            for key, value in node.items():
                path = f"{prefix}.{key}" if prefix else str(key)
                if isinstance(value, Mapping):
                    yield from walk(path, value)
                else:
                    yield path, value
        return dict(walk("", self.settings))


_runtime: ContextVar[Runtime | None] = ContextVar("cayleysearch_runtime", default=None)


def current() -> Runtime:
    rt = _runtime.get()
    if rt is None:
        rt = Runtime()
        _runtime.set(rt)
    return rt


def APPLY(settings: Settings | Mapping[str, Any]) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)
