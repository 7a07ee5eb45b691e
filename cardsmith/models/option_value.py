"""
Option values — single value or one value per card.

Every option a drawing command accepts is either a Scalar (the same value
for every card) or a PerCard sequence (one value per card in the deck).
Lists and tuples are PerCard; everything else, strings included, is a
Scalar. The distinction is made once, at the boundary, by `classify`, and
`expand` immediately turns either form into a tuple of exactly deck-size
values. Nothing downstream asks "is this a list?" again.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cardsmith.models.failure import ArityMismatchError

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Scalar(Generic[T]):
    """A value broadcast to every card."""

    value: T


@dataclass(frozen=True, slots=True)
class PerCard(Generic[T]):
    """One value per card, index-aligned with the deck."""

    values: tuple[T, ...]


OptionValue = Scalar[Any] | PerCard[Any]


def is_per_card(raw: Any) -> bool:
    """True for the raw forms treated as per-card sequences."""
    return isinstance(raw, (list, tuple))


def classify(raw: Any) -> OptionValue:
    """Wrap a raw option value in its Scalar or PerCard form."""
    if isinstance(raw, (Scalar, PerCard)):
        return raw
    if is_per_card(raw):
        return PerCard(tuple(raw))
    return Scalar(raw)


def expand(
    key: str,
    raw: Any,
    deck_size: int,
    convert: Callable[[Any, int], R] | None = None,
) -> tuple[R, ...]:
    """
    Broadcast a raw option value to exactly one converted value per card.

    Args:
        key: Option key (named in arity errors)
        raw: Raw value, scalar or per-card sequence
        deck_size: Number of cards in the deck
        convert: Optional per-element conversion, called as convert(value, index)

    Returns:
        Tuple of length deck_size

    Raises:
        ArityMismatchError: If a per-card sequence is not exactly deck_size long
    """
    value = classify(raw)

    if isinstance(value, PerCard):
        if len(value.values) != deck_size:
            raise ArityMismatchError(key, deck_size, len(value.values))
        elements: Sequence[Any] = value.values
    else:
        elements = [value.value] * deck_size

    if convert is None:
        return tuple(elements)
    return tuple(convert(element, index) for index, element in enumerate(elements))
