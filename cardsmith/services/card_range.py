"""
Card range resolution.

A range expression selects the cards a single drawing command applies to:
- None or "all": every card in deck order
- an int: that single card
- a list, tuple or range of ints: exactly those cards, in the given order

Order and duplicates are kept as written. Rendering the same card twice in
one command is legitimate. Out-of-bounds indices are errors, never dropped.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from cardsmith.models.failure import InvalidRangeError, RangeOutOfBoundsError

ALL = "all"


@dataclass(frozen=True, slots=True)
class CardRange:
    """
    Resolved, validated sequence of card indices.

    Attributes:
        indices: Card indices in the order they will be rendered
        deck_size: Size of the deck the indices were validated against
    """

    indices: tuple[int, ...]
    deck_size: int

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, index: object) -> bool:
        return index in self.indices


def resolve_range(expr: Any, deck_size: int) -> CardRange:
    """
    Resolve a range expression against a deck.

    Args:
        expr: None, "all", an int, or a list/tuple/range of ints
        deck_size: Number of cards in the deck

    Returns:
        CardRange with validated indices. May be empty (a no-op command).

    Raises:
        RangeOutOfBoundsError: If any index is outside [0, deck_size)
        InvalidRangeError: If the expression or one of its elements is
            not an integer
    """
    if expr is None or (isinstance(expr, str) and expr.strip().lower() == ALL):
        return CardRange(indices=tuple(range(deck_size)), deck_size=deck_size)

    if isinstance(expr, (list, tuple, range)):
        indices = tuple(_validate_index(element, deck_size, expr) for element in expr)
        return CardRange(indices=indices, deck_size=deck_size)

    return CardRange(indices=(_validate_index(expr, deck_size, expr),), deck_size=deck_size)


def _validate_index(element: Any, deck_size: int, expr: Any) -> int:
    if isinstance(element, bool) or not isinstance(element, int):
        raise InvalidRangeError(expr, f"{element!r} is not a card index")
    if not 0 <= element < deck_size:
        raise RangeOutOfBoundsError(element, deck_size)
    return element
