"""
List bundled card presets.

    python -m cardsmith.jobs.list_presets
    python -m cardsmith.jobs.list_presets --check poker --vendor the_game_crafter

With --check, prints nothing on success and exits 0 when the card type (and
vendor, if given) resolves, 1 otherwise.
"""

import argparse
import logging
import sys

from cardsmith.config import settings
from cardsmith.services.preset_factory import PresetFactory, default_factory

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="List bundled card presets.")
    parser.add_argument("--check", metavar="NAME", help="Exit 0 if NAME is a preset, 1 if not.")
    parser.add_argument("--vendor", help="With --check, also require a spec from this vendor.")
    return parser.parse_args(argv)


def check_preset(factory: PresetFactory, name: str, vendor: str | None = None) -> bool:
    """Whether a card type (and vendor) resolves, without building a deck."""
    if not factory.has_preset(name):
        logger.info("No preset named %s", name)
        return False
    if vendor is not None and not factory.has_vendor(name, vendor):
        logger.info("Vendor %s has no spec for %s", vendor, name)
        return False
    return True


def format_presets(factory: PresetFactory) -> list[str]:
    """One line per preset: name, size, vendors."""
    lines = []
    for name in factory.names():
        bag = factory.base_bag(name)
        vendors = ", ".join(factory.vendors_for(name)) or "-"
        lines.append(f"{name:<10} {bag['width']} x {bag['height']:<8} vendors: {vendors}")
    return lines


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)
    factory = default_factory()

    if args.check:
        return 0 if check_preset(factory, args.check, args.vendor) else 1

    for line in format_presets(factory):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
