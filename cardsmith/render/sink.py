"""
Rendering sink protocol.

A sink receives fully resolved, per-card parameters and draws them. It never
sees per-card sequences, unit strings or layout references: everything it
gets is a concrete value for exactly one card.

Sinks must raise synchronously on failure. If a sink is used from several
threads, each call touches only the card index it was given.
"""

from typing import Protocol

from cardsmith.options.base import OptionRow


class RenderSink(Protocol):
    """Destination of drawing commands, one card at a time."""

    def background(self, index: int, color: OptionRow) -> None: ...

    def png(
        self,
        index: int,
        file: str,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None: ...

    def svg(
        self,
        index: int,
        file: str | None,
        svg_args: OptionRow,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None: ...

    def rect(self, index: int, box: OptionRow, draw: OptionRow) -> None: ...

    def circle(self, index: int, coords: OptionRow, draw: OptionRow) -> None: ...

    def line(self, index: int, coords: OptionRow, draw: OptionRow) -> None: ...

    def text(self, index: int, text: OptionRow, box: OptionRow, trans: OptionRow) -> None: ...

    def save_png(self, index: int, save: OptionRow) -> None: ...
