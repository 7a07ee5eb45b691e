"""
Layout registry service.

Loads layout sources (YAML files, bundled layout names, or already-parsed
mappings) and deep-merges them into one registry of named layout entries.
A layout entry is a bag of default option values that drawing commands
reference with the `layout` option.

Merge rules, applied source by source in the order given:
- a later source overwrites leaf values at the same key path
- keys only present in an earlier source are kept
- nested mappings are merged key by key, never replaced wholesale

After merging, `extends` references are flattened and the whole tree is
frozen. Entries are read-only from then on.
"""

import logging
from collections.abc import Iterable, Mapping
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from cardsmith.models.failure import InvalidLayoutError

logger = logging.getLogger(__name__)

BUILTIN_LAYOUT_DIR = Path(__file__).parent.parent / "data" / "layouts"

EXTENDS_KEY = "extends"

EMPTY_ENTRY: Mapping[str, Any] = MappingProxyType({})

LayoutSource = str | PathLike[str] | Mapping[str, Any]


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two mapping trees into a new dict.

    Neither input is modified. Values from override win at every leaf; nested
    mappings present on both sides are merged instead of replaced.

    Args:
        base: Earlier tree
        override: Later tree

    Returns:
        New merged tree
    """
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(existing, value)
        else:
            merged[key] = value
    return merged


def freeze(value: Any) -> Any:
    """Return a read-only copy of a YAML-like tree (mappings and lists)."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


class LayoutRegistry:
    """
    Read-only mapping from layout entry name to its default option bag.

    Usage:
        registry = load_layout(["base.yml", "overrides.yml"])
        defaults = registry.lookup("title")  # empty mapping if absent
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._entries: Mapping[str, Mapping[str, Any]] = freeze(entries or {})

    def lookup(self, name: str | None) -> Mapping[str, Any]:
        """
        Get the defaults for a layout entry.

        A missing entry is not an error: an empty mapping is returned and the
        caller falls back to built-in defaults.
        """
        if name is None:
            return EMPTY_ENTRY
        entry = self._entries.get(str(name))
        if entry is None:
            logger.warning("Layout entry '%s' does not exist; using built-in defaults", name)
            return EMPTY_ENTRY
        return entry

    def names(self) -> list[str]:
        """Entry names in load order."""
        return list(self._entries)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Mutable deep copy of the entries (for inspection and dumping)."""
        return {name: _thaw(entry) for name, entry in self._entries.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LayoutRegistry({self.names()!r})"


def load_layout(sources: LayoutSource | Iterable[LayoutSource] | None) -> LayoutRegistry:
    """
    Load and merge layout sources into a registry.

    Args:
        sources: None, a single source, or an ordered sequence of sources.
            A source is a path to a YAML file, the name of a bundled layout
            (e.g. "playing_card"), or an already-parsed mapping.

    Returns:
        LayoutRegistry with `extends` flattened

    Raises:
        InvalidLayoutError: If a source is missing, unparseable, or its
            entries are not mappings, or `extends` is broken
    """
    merged: dict[str, Any] = {}
    for source in _as_source_list(sources):
        label, entries = _read_source(source)
        for name, entry in entries.items():
            merged[name] = deep_merge(merged.get(name, {}), entry)
        logger.debug("Loaded %d layout entries from %s", len(entries), label)

    return LayoutRegistry(_flatten_extends(merged))


def _as_source_list(sources: Any) -> list[LayoutSource]:
    if sources is None:
        return []
    if isinstance(sources, (str, PathLike, Mapping)):
        return [sources]
    return list(sources)


def _read_source(source: LayoutSource) -> tuple[str, dict[str, dict[str, Any]]]:
    if isinstance(source, Mapping):
        return "<mapping>", _validate_entries("<mapping>", source)

    path = _locate(source)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidLayoutError(str(path), f"YAML error: {e}") from e

    return str(path), _validate_entries(str(path), data or {})


def _locate(source: str | PathLike[str]) -> Path:
    path = Path(source)
    if path.is_file():
        return path

    builtin = BUILTIN_LAYOUT_DIR / f"{path.stem}.yml"
    if path.parent == Path(".") and builtin.is_file():
        return builtin

    raise InvalidLayoutError(str(source), "file not found and not a bundled layout")


def _validate_entries(label: str, data: Any) -> dict[str, dict[str, Any]]:
    if not isinstance(data, Mapping):
        raise InvalidLayoutError(label, "top level must be a mapping of entry names")

    entries: dict[str, dict[str, Any]] = {}
    for name, entry in data.items():
        if entry is None:
            entry = {}
        if not isinstance(entry, Mapping):
            raise InvalidLayoutError(label, f"entry '{name}' must be a mapping")
        entries[str(name)] = {str(k): v for k, v in entry.items()}
    return entries


def _flatten_extends(entries: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
    flattened: dict[str, dict[str, Any]] = {}

    def flatten(name: str, chain: tuple[str, ...]) -> dict[str, Any]:
        if name in flattened:
            return flattened[name]
        if name in chain:
            cycle = " -> ".join([*chain, name])
            raise InvalidLayoutError(name, f"extends cycle: {cycle}")

        entry = entries[name]
        parents = entry.get(EXTENDS_KEY)
        if parents is None:
            parents = []
        elif isinstance(parents, str):
            parents = [parents]
        elif not isinstance(parents, (list, tuple)) or not all(
            isinstance(parent, str) for parent in parents
        ):
            raise InvalidLayoutError(
                name, f"extends must be an entry name or a list of names, got {parents!r}"
            )

        result: dict[str, Any] = {}
        for parent in parents:
            if parent not in entries:
                raise InvalidLayoutError(name, f"extends unknown entry '{parent}'")
            result = deep_merge(result, flatten(parent, (*chain, name)))

        own = {k: v for k, v in entry.items() if k != EXTENDS_KEY}
        flattened[name] = deep_merge(result, own)
        return flattened[name]

    return {name: flatten(name, ()) for name in entries}


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value
