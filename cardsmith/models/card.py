"""
Card — one addressable unit of output within a deck.

Cards are created once, in order, when the deck is built. A card knows its
index and its deck. Drawing goes through the card to the deck's rendering
sink, one fully resolved set of parameters at a time.
"""

import weakref
from typing import TYPE_CHECKING

from cardsmith.options.base import OptionRow

if TYPE_CHECKING:
    from cardsmith.deck import Deck
    from cardsmith.render.sink import RenderSink


class Card:
    """
    A single card of a deck.

    Attributes:
        index: Position in the deck (0-based, stable for the deck's lifetime)
    """

    __slots__ = ("index", "_deck_ref", "__weakref__")

    def __init__(self, deck: "Deck", index: int) -> None:
        self.index = index
        self._deck_ref = weakref.ref(deck)

    @property
    def deck(self) -> "Deck":
        deck = self._deck_ref()
        if deck is None:
            raise ReferenceError(f"card {self.index} outlived its deck")
        return deck

    @property
    def sink(self) -> "RenderSink":
        return self.deck.sink

    def background(self, color: OptionRow) -> None:
        self.sink.background(self.index, color)

    def png(
        self,
        file: str,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        self.sink.png(self.index, file, box, paint, trans)

    def svg(
        self,
        file: str | None,
        svg_args: OptionRow,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        self.sink.svg(self.index, file, svg_args, box, paint, trans)

    def rect(self, box: OptionRow, draw: OptionRow) -> None:
        self.sink.rect(self.index, box, draw)

    def circle(self, coords: OptionRow, draw: OptionRow) -> None:
        self.sink.circle(self.index, coords, draw)

    def line(self, coords: OptionRow, draw: OptionRow) -> None:
        self.sink.line(self.index, coords, draw)

    def text(self, text: OptionRow, box: OptionRow, trans: OptionRow) -> None:
        self.sink.text(self.index, text, box, trans)

    def save_png(self, save: OptionRow) -> None:
        self.sink.save_png(self.index, save)

    def __repr__(self) -> str:
        return f"Card(index={self.index})"
