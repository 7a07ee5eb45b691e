"""
Deck scripts.

A deck script is a YAML document (or an already-parsed mapping) describing
a deck and the drawing commands to run on it:

    deck:
      preset: poker              # optional; plain Deck arguments otherwise
      vendor: the_game_crafter   # optional, only with a preset
      cards: 3
      layout: playing_card
    commands:
      - background: {color: white}
      - text: {str: [A, 2, 3], layout: top_index}
      - save_png: {prefix: ace_}

Relative `config` and `layout` paths are looked up in the script's directory
first.
"""

import logging
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Any

import yaml

from cardsmith.deck import Deck
from cardsmith.models.failure import ConfigError, InvalidOptionError
from cardsmith.render.sink import RenderSink
from cardsmith.services.preset_factory import PresetFactory, default_factory

logger = logging.getLogger(__name__)

COMMANDS: frozenset[str] = frozenset(
    {"background", "png", "svg", "rect", "circle", "line", "text", "save_png"}
)

Script = Mapping[str, Any]


def load_script(path: str | PathLike[str]) -> dict[str, Any]:
    """
    Read a deck script from a YAML file.

    Raises:
        ConfigError: If the file is missing, unparseable or not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(str(path), "file not found") from e
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"YAML error: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "a deck script must be a mapping")
    return data


def build_deck(
    spec: Mapping[str, Any],
    sink: RenderSink | None = None,
    base_dir: Path | None = None,
    factory: PresetFactory | None = None,
) -> Deck:
    """
    Build the deck described by a script's `deck` section.

    Raises:
        UnknownPresetError: If `preset` names no registered preset
        UnknownVendorError: If `vendor` has no spec for the preset
    """
    args = dict(spec)
    preset = args.pop("preset", None)

    if base_dir is not None:
        if isinstance(args.get("config"), str):
            args["config"] = _relative_to(base_dir, args["config"])
        if isinstance(args.get("layout"), str):
            args["layout"] = _relative_to(base_dir, args["layout"])
        elif isinstance(args.get("layout"), list):
            args["layout"] = [
                _relative_to(base_dir, s) if isinstance(s, str) else s for s in args["layout"]
            ]

    if sink is not None:
        args["sink"] = sink

    if preset is None:
        if "vendor" in args:
            raise InvalidOptionError("vendor", args["vendor"], "a vendor needs a preset")
        return Deck(**args)

    factory = factory or default_factory()
    return factory.build_from_preset(str(preset), **args)


def run_commands(deck: Deck, commands: Any) -> int:
    """
    Run drawing commands on a deck, in order.

    Returns:
        Number of commands run

    Raises:
        InvalidOptionError: If an entry is malformed or names no command
        ResolutionError: If a command's options fail to resolve
    """
    if commands is None:
        return 0
    if not isinstance(commands, list):
        raise InvalidOptionError("commands", commands, "expected a list of commands")

    for position, entry in enumerate(commands):
        if not isinstance(entry, Mapping) or len(entry) != 1:
            raise InvalidOptionError(
                "commands", entry, f"entry {position} must be a single {{command: options}}"
            )
        ((name, opts),) = entry.items()
        if name not in COMMANDS:
            allowed = ", ".join(sorted(COMMANDS))
            raise InvalidOptionError(
                "commands", name, f"unknown command; expected one of: {allowed}"
            )
        if opts is None:
            opts = {}
        if not isinstance(opts, Mapping):
            raise InvalidOptionError(name, opts, "command options must be a mapping")

        logger.debug("Running %s %s", name, dict(opts))
        getattr(deck, name)(**{str(k): v for k, v in opts.items()})

    return len(commands)


def run_script(
    script: Script | str | PathLike[str],
    sink: RenderSink | None = None,
    base_dir: str | PathLike[str] | None = None,
) -> Deck:
    """
    Build a deck from a script and run its commands.

    Args:
        script: Parsed script mapping, or path to a YAML script
        sink: Rendering sink; defaults to the deck's own PillowSink
        base_dir: Directory for relative config and layout paths. Defaults
            to the script's directory when a path is given.

    Returns:
        The deck, after every command has run
    """
    if isinstance(script, Mapping):
        data = dict(script)
    else:
        data = load_script(script)
        if base_dir is None:
            base_dir = Path(script).parent

    deck_spec = data.get("deck") or {}
    if not isinstance(deck_spec, Mapping):
        raise ConfigError("deck", "the deck section must be a mapping")

    deck = build_deck(deck_spec, sink, Path(base_dir) if base_dir is not None else None)
    count = run_commands(deck, data.get("commands"))
    logger.info("Ran %d commands on %r", count, deck)
    return deck


def _relative_to(base_dir: Path, value: str) -> str:
    candidate = base_dir / value
    return str(candidate) if candidate.is_file() else value
