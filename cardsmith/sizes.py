"""
One constructor per bundled preset.

    from cardsmith import sizes

    deck = sizes.poker(cards=54, vendor="the_game_crafter")

The constructors are generated from the preset registry when this module is
imported. Any other attribute raises AttributeError as usual.
"""

from collections.abc import Callable
from typing import Any

from cardsmith.deck import Deck
from cardsmith.services.preset_factory import PresetFactory, default_factory

DeckConstructor = Callable[..., Deck]


def make_constructor(factory: PresetFactory, name: str) -> DeckConstructor:
    """Build a constructor for one preset of a factory."""

    def build(**args: Any) -> Deck:
        return factory.build_from_preset(name, **args)

    build.__name__ = build.__qualname__ = name
    description = factory.description(name)
    build.__doc__ = f"Build a deck from the '{name}' preset."
    if description:
        build.__doc__ = f"Build a deck from the '{name}' preset: {description}."
    return build


def constructors(factory: PresetFactory) -> dict[str, DeckConstructor]:
    return {name: make_constructor(factory, name) for name in factory.names()}


_CONSTRUCTORS = constructors(default_factory())
globals().update(_CONSTRUCTORS)

__all__ = sorted(_CONSTRUCTORS)


def __getattr__(name: str) -> Any:
    raise AttributeError(f"module {__name__!r} has no preset constructor {name!r}")


def __dir__() -> list[str]:
    return sorted({*globals(), *_CONSTRUCTORS})
