"""Background fill and output file options."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

from cardsmith.models.failure import InvalidOptionError
from cardsmith.options.base import Columns, OptionKind, resolve_color

ROTATIONS: frozenset[Any] = frozenset({False, "clockwise", "counterclockwise"})


class Background(OptionKind):
    """Solid color filling the whole card."""

    defaults: ClassVar[Mapping[str, Any]] = {"color": "white"}

    def __init__(self, custom_colors: Mapping[str, str] | None = None) -> None:
        self.custom_colors = custom_colors or {}

    def convert_color(self, value: Any, _index: int, _dpi: float) -> str | None:
        return resolve_color("color", value, self.custom_colors)


class SaveOptions(OptionKind):
    """
    Where each card is written.

    Defaults come from the deck configuration. The resolved table carries
    the final `path` of every card, built from dir, prefix and count_format.
    """

    defaults: ClassVar[Mapping[str, Any]] = {
        "dir": "_output",
        "prefix": "card_",
        "count_format": "{:02d}",
        "rotate": False,
    }
    choices: ClassVar[Mapping[str, frozenset[Any]]] = {"rotate": ROTATIONS}

    def __init__(
        self,
        output_dir: str = "_output",
        prefix: str = "card_",
        count_format: str = "{:02d}",
    ) -> None:
        self._defaults = {
            **self.defaults,
            "dir": output_dir,
            "prefix": prefix,
            "count_format": count_format,
        }

    def default_values(self) -> Mapping[str, Any]:
        return self._defaults

    def convert_dir(self, value: Any, _index: int, _dpi: float) -> str:
        if not isinstance(value, str) or not value:
            raise InvalidOptionError("dir", value, "expected a directory path")
        return value

    def convert_prefix(self, value: Any, _index: int, _dpi: float) -> str:
        return "" if value is None else str(value)

    def convert_count_format(self, value: Any, index: int, _dpi: float) -> str:
        try:
            value.format(index)
        except (AttributeError, IndexError, KeyError, ValueError) as e:
            raise InvalidOptionError(
                "count_format", value, "expected a format string such as '{:02d}'"
            ) from e
        return value

    def finalize(self, columns: Columns, deck_size: int, dpi: float) -> Columns:
        paths = []
        for i in range(deck_size):
            name = f"{columns['prefix'][i]}{columns['count_format'][i].format(i)}.png"
            paths.append(str(Path(columns["dir"][i]) / name))
        return {**columns, "path": tuple(paths)}
