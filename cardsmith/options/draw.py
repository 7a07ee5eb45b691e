"""Draw options: fill and stroke of shapes."""

from collections.abc import Mapping
from typing import Any, ClassVar

from cardsmith.models.failure import InvalidOptionError, InvalidUnitError
from cardsmith.options.base import OptionKind, resolve_color
from cardsmith.services.units import to_pixels


class Draw(OptionKind):
    """
    Fill and stroke of a shape.

    `dash` is a space-separated string of on/off lengths, e.g. "4 2" or
    "0.02in 0.01in". An empty string draws a solid line.
    """

    defaults: ClassVar[Mapping[str, Any]] = {
        "fill_color": "#0000",
        "stroke_color": "black",
        "stroke_width": 2,
        "stroke_strategy": "fill_first",
        "join": "miter",
        "cap": "butt",
        "dash": "",
    }
    unit_keys: ClassVar[frozenset[str]] = frozenset({"stroke_width"})
    size_keys: ClassVar[frozenset[str]] = frozenset({"stroke_width"})
    choices: ClassVar[Mapping[str, frozenset[Any]]] = {
        "stroke_strategy": frozenset({"fill_first", "stroke_first"}),
        "join": frozenset({"miter", "round", "bevel"}),
        "cap": frozenset({"butt", "round", "square"}),
    }

    def __init__(self, custom_colors: Mapping[str, str] | None = None) -> None:
        self.custom_colors = custom_colors or {}

    def convert_fill_color(self, value: Any, _index: int, _dpi: float) -> str | None:
        return resolve_color("fill_color", value, self.custom_colors)

    def convert_stroke_color(self, value: Any, _index: int, _dpi: float) -> str | None:
        return resolve_color("stroke_color", value, self.custom_colors)

    def convert_dash(self, value: Any, _index: int, dpi: float) -> tuple[int, ...]:
        if value is None:
            return ()
        if not isinstance(value, str):
            raise InvalidOptionError("dash", value, "expected a string such as '4 2'")
        segments = tuple(
            to_pixels(segment, dpi, key="dash", allow_negative=False) for segment in value.split()
        )
        if any(isinstance(segment, str) for segment in segments):
            raise InvalidUnitError("dash", value, "dash segments must be lengths")
        return segments
