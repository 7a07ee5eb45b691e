"""
Render a deck script.

    python -m cardsmith.jobs.render_deck deck.yml
    python -m cardsmith.jobs.render_deck deck.yml --dry-run

A dry run resolves every command against a recording sink and writes no
files, which is enough to validate a script.
"""

import argparse
import logging
import sys
from pathlib import Path

from cardsmith.config import settings
from cardsmith.models.failure import CardsmithError
from cardsmith.render.recording import RecordingSink
from cardsmith.services.script_runner import run_script

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Render a deck from a YAML script.")
    parser.add_argument("script", type=Path, help="YAML deck script.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve every command without drawing or saving anything.",
    )
    return parser.parse_args(argv)


def render(script: Path, dry_run: bool = False) -> int:
    """
    Run a deck script.

    Returns:
        Number of drawing calls recorded on a dry run, otherwise the number
        of cards in the deck
    """
    sink = RecordingSink() if dry_run else None
    deck = run_script(script, sink=sink)

    if sink is not None:
        logger.info("Dry run of %s: %d drawing calls", script, len(sink.calls))
        return len(sink.calls)
    return len(deck)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)

    try:
        render(args.script, dry_run=args.dry_run)
    except CardsmithError as e:
        logger.error("%s", e.message)
        if e.suggestion:
            logger.error("Suggestion: %s", e.suggestion)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
