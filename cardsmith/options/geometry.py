"""
Geometry options: placement boxes and coordinates.

ScaleBox places images. Its width and height accept three sentinels besides
lengths, resolved here rather than at render time:
- "native": the image's own size
- "deck": the deck's size
- "scale": the other dimension times the image's aspect ratio

Box places shapes and text. Its width and height accept "deck".
"""

from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from cardsmith.models.failure import InvalidOptionError
from cardsmith.options.base import Columns, OptionKind
from cardsmith.services.units import round_pixels

NATIVE = "native"
SCALE = "scale"
DECK = "deck"

# card index -> (width, height) of that card's image, or None without one
IntrinsicSize = Callable[[int], tuple[int, int] | None]


class ScaleBox(OptionKind):
    """Position and size of an image on the card."""

    defaults: ClassVar[Mapping[str, Any]] = {
        "x": 0,
        "y": 0,
        "width": NATIVE,
        "height": NATIVE,
    }
    unit_keys: ClassVar[frozenset[str]] = frozenset({"x", "y", "width", "height"})
    size_keys: ClassVar[frozenset[str]] = frozenset({"width", "height"})
    sentinels: ClassVar[Mapping[str, frozenset[str]]] = {
        "width": frozenset({NATIVE, SCALE, DECK}),
        "height": frozenset({NATIVE, SCALE, DECK}),
    }

    def __init__(
        self,
        deck_width: int,
        deck_height: int,
        intrinsic_size: IntrinsicSize | None = None,
    ) -> None:
        self.deck_width = deck_width
        self.deck_height = deck_height
        self.intrinsic_size = intrinsic_size

    def finalize(self, columns: Columns, deck_size: int, dpi: float) -> Columns:
        widths = []
        heights = []
        for index in range(deck_size):
            width, height = self._fit(index, columns["width"][index], columns["height"][index])
            widths.append(width)
            heights.append(height)
        return {**columns, "width": tuple(widths), "height": tuple(heights)}

    def _fit(self, index: int, width: Any, height: Any) -> tuple[int | None, int | None]:
        if width == SCALE and height == SCALE:
            raise InvalidOptionError("width", SCALE, "width and height cannot both be 'scale'")

        if width == DECK:
            width = self.deck_width
        if height == DECK:
            height = self.deck_height

        if NATIVE in (width, height) or SCALE in (width, height):
            native = self.intrinsic_size(index) if self.intrinsic_size is not None else None
            if native is None:
                # No image on this card; nothing to size
                return _known(width), _known(height)
            native_width, native_height = native
            if width == NATIVE:
                width = native_width
            if height == NATIVE:
                height = native_height
            if width == SCALE:
                width = None
                if native_height:
                    width = round_pixels(height * native_width / native_height)
            if height == SCALE:
                height = None
                if native_width:
                    height = round_pixels(width * native_height / native_width)

        return width, height


def _known(value: Any) -> int | None:
    return value if isinstance(value, int) else None


class Box(OptionKind):
    """Rectangular region used by shapes and text."""

    defaults: ClassVar[Mapping[str, Any]] = {
        "x": 0,
        "y": 0,
        "width": DECK,
        "height": DECK,
        "radius": None,
        "x_radius": 0,
        "y_radius": 0,
    }
    unit_keys: ClassVar[frozenset[str]] = frozenset(defaults)
    size_keys: ClassVar[frozenset[str]] = frozenset(
        {"width", "height", "radius", "x_radius", "y_radius"}
    )
    sentinels: ClassVar[Mapping[str, frozenset[str]]] = {
        "width": frozenset({DECK}),
        "height": frozenset({DECK}),
    }

    def __init__(self, deck_width: int, deck_height: int) -> None:
        self.deck_width = deck_width
        self.deck_height = deck_height

    def finalize(self, columns: Columns, deck_size: int, dpi: float) -> Columns:
        widths = tuple(self.deck_width if w == DECK else w for w in columns["width"])
        heights = tuple(self.deck_height if h == DECK else h for h in columns["height"])

        # radius, when given, overrides both corner radii
        radii = columns["radius"]
        x_radii = tuple(r if r is not None else xr for r, xr in zip(radii, columns["x_radius"]))
        y_radii = tuple(r if r is not None else yr for r, yr in zip(radii, columns["y_radius"]))

        return {
            **columns,
            "width": widths,
            "height": heights,
            "x_radius": x_radii,
            "y_radius": y_radii,
        }


class Coords(OptionKind):
    """Points and radius for circles and lines."""

    defaults: ClassVar[Mapping[str, Any]] = {
        "x": 0,
        "y": 0,
        "x1": 100,
        "y1": 100,
        "x2": 150,
        "y2": 150,
        "radius": 100,
    }
    unit_keys: ClassVar[frozenset[str]] = frozenset(defaults)
    size_keys: ClassVar[frozenset[str]] = frozenset({"radius"})
