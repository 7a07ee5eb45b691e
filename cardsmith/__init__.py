"""
cardsmith — declarative card decks.

Build a deck, run drawing commands on it, and every option is resolved to
one concrete value per card before anything is drawn.
"""

from cardsmith.deck import Deck
from cardsmith.models.card import Card
from cardsmith.services.preset_factory import PresetFactory, build_from_preset
from cardsmith.services.script_runner import run_script

__all__ = [
    "Card",
    "Deck",
    "PresetFactory",
    "build_from_preset",
    "run_script",
]
