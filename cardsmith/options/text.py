"""Text options."""

from collections.abc import Mapping
from typing import Any, ClassVar

from cardsmith.models.failure import InvalidOptionError
from cardsmith.options.base import OptionKind, require_number, resolve_color


class TextSpecial(OptionKind):
    """String, font and alignment of a text command."""

    defaults: ClassVar[Mapping[str, Any]] = {
        "str": "",
        "font": "Arial",
        "font_size": 36,
        "color": "black",
        "align": "left",
        "valign": "top",
        "spacing": 0,
    }
    unit_keys: ClassVar[frozenset[str]] = frozenset({"spacing"})
    choices: ClassVar[Mapping[str, frozenset[Any]]] = {
        "align": frozenset({"left", "center", "right"}),
        "valign": frozenset({"top", "middle", "bottom"}),
    }

    def __init__(self, custom_colors: Mapping[str, str] | None = None) -> None:
        self.custom_colors = custom_colors or {}

    def convert_str(self, value: Any, _index: int, _dpi: float) -> str:
        return "" if value is None else str(value)

    def convert_font(self, value: Any, _index: int, _dpi: float) -> str:
        if not isinstance(value, str) or not value:
            raise InvalidOptionError("font", value, "expected a font name or font file path")
        return value

    def convert_font_size(self, value: Any, _index: int, _dpi: float) -> float:
        size = require_number("font_size", value)
        if size <= 0:
            raise InvalidOptionError("font_size", value, "must be positive")
        return size

    def convert_color(self, value: Any, _index: int, _dpi: float) -> str | None:
        return resolve_color("color", value, self.custom_colors)
