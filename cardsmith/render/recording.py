"""Recording sink: remembers every drawing call instead of rasterizing."""

from dataclasses import dataclass, field
from typing import Any

from cardsmith.options.base import OptionRow


@dataclass(frozen=True)
class RenderCall:
    """
    One drawing call received by the sink.

    Attributes:
        command: Command name ("png", "rect", ...)
        index: Card index
        params: Every resolved parameter of the call, flattened
    """

    command: str
    index: int
    params: dict[str, Any] = field(default_factory=dict)


class RecordingSink:
    """Sink that records calls. Used for dry runs and tests."""

    def __init__(self) -> None:
        self.calls: list[RenderCall] = []

    def _record(self, command: str, index: int, *rows: OptionRow, **extra: Any) -> None:
        params: dict[str, Any] = dict(extra)
        for row in rows:
            params.update(row)
        self.calls.append(RenderCall(command=command, index=index, params=params))

    def background(self, index: int, color: OptionRow) -> None:
        self._record("background", index, color)

    def png(
        self,
        index: int,
        file: str,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        self._record("png", index, box, paint, trans, file=file)

    def svg(
        self,
        index: int,
        file: str | None,
        svg_args: OptionRow,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        self._record("svg", index, svg_args, box, paint, trans, file=file)

    def rect(self, index: int, box: OptionRow, draw: OptionRow) -> None:
        self._record("rect", index, box, draw)

    def circle(self, index: int, coords: OptionRow, draw: OptionRow) -> None:
        self._record("circle", index, coords, draw)

    def line(self, index: int, coords: OptionRow, draw: OptionRow) -> None:
        self._record("line", index, coords, draw)

    def text(self, index: int, text: OptionRow, box: OptionRow, trans: OptionRow) -> None:
        self._record("text", index, text, box, trans)

    def save_png(self, index: int, save: OptionRow) -> None:
        self._record("save_png", index, save)

    def for_command(self, command: str) -> list[RenderCall]:
        """Calls of one command, in the order they were made."""
        return [call for call in self.calls if call.command == command]

    def values(self, command: str, key: str) -> list[Any]:
        """One parameter across every call of a command."""
        return [call.params[key] for call in self.for_command(command)]

    def clear(self) -> None:
        self.calls.clear()
