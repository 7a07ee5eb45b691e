"""Paint options: alpha, blend mode and mask color."""

from collections.abc import Mapping
from typing import Any, ClassVar

from cardsmith.models.failure import InvalidOptionError
from cardsmith.options.base import OptionKind, require_number, resolve_color

BLEND_MODES: frozenset[str] = frozenset(
    {
        "none",
        "multiply",
        "screen",
        "overlay",
        "darken",
        "lighten",
        "color_dodge",
        "color_burn",
        "hard_light",
        "soft_light",
        "difference",
        "exclusion",
        "hsl_hue",
        "hsl_saturation",
        "hsl_color",
        "hsl_luminosity",
    }
)


class Paint(OptionKind):
    """How an image is composited onto the card."""

    defaults: ClassVar[Mapping[str, Any]] = {
        "alpha": 1.0,
        "blend": "none",
        "mask": None,
    }
    choices: ClassVar[Mapping[str, frozenset[Any]]] = {"blend": BLEND_MODES}

    def __init__(self, custom_colors: Mapping[str, str] | None = None) -> None:
        self.custom_colors = custom_colors or {}

    def convert_alpha(self, value: Any, _index: int, _dpi: float) -> float:
        alpha = require_number("alpha", value, minimum=0.0)
        if alpha > 1.0:
            raise InvalidOptionError("alpha", value, "must be between 0.0 and 1.0")
        return float(alpha)

    def convert_mask(self, value: Any, _index: int, _dpi: float) -> str | None:
        return resolve_color("mask", value, self.custom_colors)
