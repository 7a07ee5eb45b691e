"""
Preset factory.

Builds decks of standard card sizes from a registry of presets:

    factory.build_from_preset("poker", cards=54, vendor="the_game_crafter")

Bag precedence, lowest to highest:
    preset base bag < vendor corrections < caller arguments

The merged bag also records `card_name` (and `vendor`, when one was named)
so the deck knows what it was built from.

A card type with no preset raises UnknownPresetError. A named vendor with
no corrections for the card type raises UnknownVendorError. Both are
LookupErrors, never AttributeErrors, so generated constructors (see
`cardsmith.sizes`) can tell them apart from a missing attribute.
"""

import logging
from collections.abc import Mapping
from functools import cache
from os import PathLike
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cardsmith.deck import Deck
from cardsmith.models.failure import ConfigError, UnknownPresetError, UnknownVendorError
from cardsmith.models.preset import PresetCatalog, PresetSpec, VendorSpec
from cardsmith.services.layout_registry import deep_merge

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
PRESETS_FILE = DATA_DIR / "presets.yml"
VENDORS_FILE = DATA_DIR / "vendors.yml"


class PresetFactory:
    """
    Registry of presets and vendor corrections.

    Usage:
        factory = PresetFactory.from_files(PRESETS_FILE, VENDORS_FILE)
        factory.has_preset("poker")             # True
        factory.resolve("poker", {"cards": 3})  # merged construction bag
        deck = factory.build_from_preset("poker", cards=3)
    """

    def __init__(self, catalog: PresetCatalog) -> None:
        self._presets: dict[str, PresetSpec] = dict(catalog.presets)
        # (card type, vendor) -> corrections
        self._vendors: dict[tuple[str, str], VendorSpec] = {
            (card_type, vendor): spec
            for vendor, by_type in catalog.vendors.items()
            for card_type, spec in by_type.items()
        }

        orphans = sorted({t for t, _ in self._vendors} - set(self._presets))
        if orphans:
            logger.warning("Vendor specs for unregistered card types: %s", ", ".join(orphans))

    @classmethod
    def from_files(
        cls,
        presets_path: str | PathLike[str],
        vendors_path: str | PathLike[str] | None = None,
    ) -> "PresetFactory":
        """
        Load presets (and optionally vendor specs) from YAML files.

        Raises:
            ConfigError: If a file is missing, unparseable or fails validation
        """
        data: dict[str, Any] = {"presets": _read_yaml(presets_path)}
        if vendors_path is not None:
            data["vendors"] = _read_yaml(vendors_path)

        try:
            catalog = PresetCatalog.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(presets_path), str(e)) from e

        logger.debug(
            "Loaded %d presets and %d vendor specs",
            len(catalog.presets),
            sum(len(by_type) for by_type in catalog.vendors.values()),
        )
        return cls(catalog)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def has_preset(self, name: str) -> bool:
        """Whether a card type resolves to a preset. Builds nothing."""
        return name in self._presets

    def has_vendor(self, name: str, vendor: str) -> bool:
        return (name, vendor) in self._vendors

    def names(self) -> list[str]:
        """Registered card types, sorted."""
        return sorted(self._presets)

    def vendors_for(self, name: str) -> list[str]:
        """
        Vendors with corrections for a card type, sorted.

        Raises:
            UnknownPresetError: If the card type has no preset
        """
        self._preset(name)
        return sorted(vendor for card_type, vendor in self._vendors if card_type == name)

    def description(self, name: str) -> str | None:
        return self._preset(name).description

    def base_bag(self, name: str) -> dict[str, Any]:
        """
        Construction defaults of a card type, before vendor corrections.

        Raises:
            UnknownPresetError: If the card type has no preset
        """
        return self._preset(name).bag()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def resolve(self, name: str, args: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Merge preset, vendor corrections and caller arguments into one bag.

        Args:
            name: Card type
            args: Caller arguments; a non-None `vendor` names the vendor

        Returns:
            New dict of deck-construction arguments. `args` is not modified.

        Raises:
            UnknownPresetError: If the card type has no preset
            UnknownVendorError: If the named vendor has no spec for the type
        """
        args = dict(args or {})
        bag = self.base_bag(name)

        vendor = args.get("vendor")
        if vendor is not None:
            spec = self._vendors.get((name, str(vendor)))
            if spec is None:
                raise UnknownVendorError(name, str(vendor))
            bag = deep_merge(bag, spec.bag())
        else:
            args.pop("vendor", None)

        bag = deep_merge(bag, args)
        bag["card_name"] = name
        logger.debug("Resolved preset %s (vendor=%s): %s", name, vendor, bag)
        return bag

    def build_from_preset(self, name: str, **args: Any) -> Deck:
        """
        Build a deck from a preset.

        Raises:
            UnknownPresetError: If the card type has no preset
            UnknownVendorError: If the named vendor has no spec for the type
        """
        return Deck(**self.resolve(name, args))

    def _preset(self, name: str) -> PresetSpec:
        try:
            return self._presets[name]
        except KeyError:
            raise UnknownPresetError(name) from None


def _read_yaml(path: str | PathLike[str]) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(str(path), "file not found") from e
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"YAML error: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top level must be a mapping")
    return data


@cache
def default_factory() -> PresetFactory:
    """The factory over the bundled presets and vendor specs, loaded once."""
    return PresetFactory.from_files(PRESETS_FILE, VENDORS_FILE)


def build_from_preset(name: str, **args: Any) -> Deck:
    """Build a deck from a bundled preset."""
    return default_factory().build_from_preset(name, **args)
