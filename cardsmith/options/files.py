"""
Input file options.

InputFile resolves image paths against the deck's image directory and
checks they exist while resolving, so a missing file aborts the command
before anything is drawn. None or an empty string means "nothing to draw on
this card" and is not an error.

SvgSpecial carries the SVG-only options: inline XML data, the id of a
single element to render, and whether that id is mandatory.
"""

from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Any, ClassVar

from cardsmith.models.failure import InputFileNotFoundError, InvalidOptionError
from cardsmith.options.base import OptionKind, OptionRow, require_bool


class InputFile(OptionKind):
    """File to load for each card."""

    defaults: ClassVar[Mapping[str, Any]] = {"file": None}

    def __init__(self, img_dir: str | PathLike[str] = ".") -> None:
        self.img_dir = Path(img_dir)

    def convert_file(self, value: Any, _index: int, _dpi: float) -> str | None:
        if value is None or value == "":
            return None
        if not isinstance(value, (str, PathLike)):
            raise InvalidOptionError("file", value, "expected a file path")

        path = Path(value)
        if not path.is_absolute():
            path = self.img_dir / path
        if not path.is_file():
            raise InputFileNotFoundError("file", str(path.resolve()))
        return str(path)


class SvgSpecial(OptionKind):
    """SVG-only options."""

    defaults: ClassVar[Mapping[str, Any]] = {
        "data": None,
        "id": None,
        "force_id": False,
    }

    def convert_data(self, value: Any, _index: int, _dpi: float) -> str | None:
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise InvalidOptionError("data", value, "expected SVG XML as a string")
        return value

    def convert_id(self, value: Any, _index: int, _dpi: float) -> str | None:
        if value is None or value == "":
            return None
        value = str(value)
        return value if value.startswith("#") else f"#{value}"

    def convert_force_id(self, value: Any, _index: int, _dpi: float) -> bool:
        return require_bool("force_id", value)


def should_render_svg(svg: OptionRow, file: str | None) -> bool:
    """
    Decide whether a card gets its SVG drawn.

    A card needs either a file or inline data, and with `force_id` set it
    also needs an id.
    """
    if svg.force_id and not svg.id:
        return False
    return bool(file or svg.data)
