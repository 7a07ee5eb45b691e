"""Transform options: rotation, flips and cropping of loaded images."""

from collections.abc import Mapping
from typing import Any, ClassVar

from cardsmith.options.base import Columns, OptionKind, require_bool, require_number


class Rotation(OptionKind):
    """Rotation only, in radians. Used by text, which is never cropped or flipped."""

    defaults: ClassVar[Mapping[str, Any]] = {"angle": 0}

    def convert_angle(self, value: Any, _index: int, _dpi: float) -> float:
        return float(require_number("angle", value))


class Transform(Rotation):
    """
    Affine and crop parameters for an image.

    Angles are in radians and rotate about the image's upper-left corner.
    `crop_width` and `crop_height` default to "native" (no crop).
    `crop_corner_radius`, when given, overrides both corner radii.
    """

    defaults: ClassVar[Mapping[str, Any]] = {
        "angle": 0,
        "flip_horizontal": False,
        "flip_vertical": False,
        "crop_x": 0,
        "crop_y": 0,
        "crop_width": "native",
        "crop_height": "native",
        "crop_corner_radius": None,
        "crop_corner_x_radius": 0,
        "crop_corner_y_radius": 0,
    }
    unit_keys: ClassVar[frozenset[str]] = frozenset(
        {
            "crop_x",
            "crop_y",
            "crop_width",
            "crop_height",
            "crop_corner_radius",
            "crop_corner_x_radius",
            "crop_corner_y_radius",
        }
    )
    size_keys: ClassVar[frozenset[str]] = unit_keys
    sentinels: ClassVar[Mapping[str, frozenset[str]]] = {
        "crop_width": frozenset({"native"}),
        "crop_height": frozenset({"native"}),
    }

    def convert_flip_horizontal(self, value: Any, _index: int, _dpi: float) -> bool:
        return require_bool("flip_horizontal", value)

    def convert_flip_vertical(self, value: Any, _index: int, _dpi: float) -> bool:
        return require_bool("flip_vertical", value)

    def finalize(self, columns: Columns, deck_size: int, dpi: float) -> Columns:
        radii = columns["crop_corner_radius"]
        return {
            **columns,
            "crop_corner_x_radius": tuple(
                r if r is not None else xr for r, xr in zip(radii, columns["crop_corner_x_radius"])
            ),
            "crop_corner_y_radius": tuple(
                r if r is not None else yr for r, yr in zip(radii, columns["crop_corner_y_radius"])
            ),
        }
