# src/cayleysearch/registry.py
"""
Classifier registry.

A classifier is a plain function ``fn(ctx) -> bool | (bool, detail)``
marked with ``@classifier``. Discovery looks at ``<workspace>/classifiers``
first and at the packaged ``cayleysearch.classifiers`` modules second;
when two functions share a label the one found first is kept, so a user
module can replace a packaged property.
"""

from __future__ import annotations

import pkgutil
import re
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from importlib import import_module
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from types import ModuleType

import cayleysearch.classifiers as builtin_classifiers

MARK = "__table_property__"


def token_for(label: str) -> str:
    """Profile key of a label: 'Abelian group' -> 'ABELIAN_GROUP'."""
    return re.sub(r"[^0-9A-Za-z]+", "_", label).strip("_").upper()


@dataclass(frozen=True)
class PropertyInfo:
    label: str
    category: str
    description: str = ""
    limit: int | None = None


def classifier(*, label: str, category: str, description: str = "", limit: int | None = None):
    """
    Mark ``fn`` as a table property.

    limit: largest table order the check runs for while fast mode is on.
    """
    info = PropertyInfo(label, category, description, None if limit is None else int(limit))

    def mark(fn: Callable) -> Callable:
        setattr(fn, MARK, info)
        return fn
    return mark


def property_info(fn: Callable) -> PropertyInfo | None:
    info = getattr(fn, MARK, None)
    return info if isinstance(info, PropertyInfo) else None


@dataclass
class Index:
    funcs: dict[str, Callable] = field(default_factory=dict)
    categories: dict[str, str] = field(default_factory=dict)
    descriptions: dict[str, str] = field(default_factory=dict)
    label_to_token: dict[str, str] = field(default_factory=dict)
    limits: dict[str, int] = field(default_factory=dict)

    def add(self, fn: Callable, info: PropertyInfo) -> None:
        self.funcs[info.label] = fn
        self.categories[info.label] = info.category
        self.descriptions[info.label] = info.description
        self.label_to_token[info.label] = token_for(info.label)
        if info.limit is not None:
            self.limits[info.label] = info.limit


@dataclass
class DiscoveryReport:
    loaded: list[tuple[str, int]] = field(default_factory=list)              # (source, labels added)
    failed: list[tuple[str, str]] = field(default_factory=list)              # (source, error)
    duplicates: list[tuple[str, str, str]] = field(default_factory=list)     # (label, skipped, kept)


# --- module sources ------------------------------------------------------------

def _load_file(path: Path) -> ModuleType:
    name = f"_cayleysearch_ws_{path.stem}"
    spec = spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {path}")
    module = module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


def _workspace_sources(workspace: Path) -> Iterator[tuple[str, Callable[[], ModuleType]]]:
    folder = workspace / "classifiers"
    if not folder.is_dir():
        return
    for path in sorted(folder.glob("*.py")):
        if path.name != "__init__.py":
            yield f"ws:{path.name}", lambda p=path: _load_file(p)


def _package_sources() -> Iterator[tuple[str, Callable[[], ModuleType]]]:
    prefix = builtin_classifiers.__name__
    for info in sorted(pkgutil.iter_modules(builtin_classifiers.__path__), key=lambda m: m.name):
        name = f"{prefix}.{info.name}"
        yield f"pkg:{name}", lambda n=name: import_module(n)


def _marked_functions(module: ModuleType) -> list[Callable]:
    found = [obj for obj in vars(module).values() if callable(obj) and property_info(obj)]
    # listing order follows the source file
    return sorted(found, key=lambda f: getattr(getattr(f, "__code__", None), "co_firstlineno", 0))


# --- discovery --------------------------------------------------------------------

def discover_with_report(workspace: Path | None = None) -> tuple[Index, DiscoveryReport]:
    index = Index()
    report = DiscoveryReport()
    kept_from: dict[str, str] = {}

    sources = [*(_workspace_sources(workspace) if workspace else ()), *_package_sources()]
    for source, load in sources:
        try:
            module = load()
        except Exception as e:
            # a broken user module must not take the packaged properties down
            report.failed.append((source, f"{type(e).__name__}: {e}"))
            continue

        added = 0
        for fn in _marked_functions(module):
            info = property_info(fn)
            if info.label in kept_from:
                report.duplicates.append((info.label, source, kept_from[info.label]))
                continue
            index.add(fn, info)
            kept_from[info.label] = source
            added += 1
        report.loaded.append((source, added))

    return index, report


def discover(workspace: Path | None = None) -> Index:
    return discover_with_report(workspace)[0]
