"""
Deck — the orchestrator of drawing commands.

A Deck owns a fixed number of cards, the deck's pixel geometry, its merged
layout entries and its configuration. Every drawing command follows the
same three steps:

    1. resolve the range and the layout entries named by the command
    2. resolve every option kind the command uses into per-card tables
    3. for each card index in range, hand that card's rows to the sink

Step 2 completes for the whole deck before step 3 starts, so an invalid
option aborts the command without drawing anything.

Usage:
    deck = Deck(width="2.5in", height="3.5in", cards=3, layout="playing_card")
    deck.background(color="white")
    deck.text(str=["A", "B", "C"], layout="title")
    deck.png(file="art.png", range=[0, 2], x="0.25in", y="0.5in")
    deck.save_png()
"""

import logging
from collections.abc import Iterator, Mapping
from os import PathLike
from typing import Any

from cardsmith.config import Conf, settings
from cardsmith.models.card import Card
from cardsmith.models.failure import ArityMismatchError, InvalidOptionError, InvalidUnitError
from cardsmith.models.option_value import is_per_card
from cardsmith.options import (
    COMMAND_KEYS,
    Background,
    Box,
    Coords,
    Draw,
    InputFile,
    OptionKind,
    Paint,
    Rotation,
    SaveOptions,
    ScaleBox,
    SvgSpecial,
    TextSpecial,
    Transform,
    should_render_svg,
)
from cardsmith.options.base import LayoutEntries
from cardsmith.options.geometry import IntrinsicSize
from cardsmith.render.images import image_size
from cardsmith.render.pillow_sink import PillowSink
from cardsmith.render.sink import RenderSink
from cardsmith.services.card_range import CardRange, resolve_range
from cardsmith.services.layout_registry import LayoutSource, load_layout
from cardsmith.services.units import parse_dpi, to_pixels

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 825
DEFAULT_HEIGHT = 1125


class Deck:
    """
    A fixed-size, ordered collection of cards.

    Attributes:
        width: Card width in pixels, bleed included on both sides
        height: Card height in pixels, bleed included on both sides
        dpi: Pixels per inch for unit conversion
        bleed: Bleed in pixels on each side
        cards: The cards, in index order
        layout: Merged layout entries
        conf: Deck configuration
        sink: Rendering sink receiving per-card drawing calls
        card_name: Preset the deck was built from, if any
        vendor: Vendor whose specification was applied, if any
    """

    def __init__(
        self,
        width: int | str = DEFAULT_WIDTH,
        height: int | str = DEFAULT_HEIGHT,
        cards: int = 1,
        dpi: float | None = None,
        bleed: int | str = 0,
        config: str | PathLike[str] | None = None,
        layout: LayoutSource | list[LayoutSource] | None = None,
        sink: RenderSink | None = None,
        card_name: str | None = None,
        vendor: str | None = None,
        conf: Conf | None = None,
    ) -> None:
        if conf is None:
            conf = Conf.load(config if config is not None else settings.default_config)
        self.conf = conf

        self.dpi = parse_dpi(dpi if dpi is not None else conf.dpi)
        self.bleed = _length("bleed", bleed, self.dpi)
        self.width = _length("width", width, self.dpi) + self.bleed * 2
        self.height = _length("height", height, self.dpi) + self.bleed * 2

        if isinstance(cards, bool) or not isinstance(cards, int) or cards < 0:
            raise InvalidOptionError("cards", cards, "expected a non-negative integer")
        self.cards: tuple[Card, ...] = tuple(Card(self, i) for i in range(cards))

        self.layout = load_layout(layout)
        self.card_name = card_name
        self.vendor = vendor
        self.sink: RenderSink = (
            sink if sink is not None else PillowSink(self.width, self.height, cards)
        )

        logger.info(
            "Building %d %dx%d cards at %s dpi%s",
            self.size,
            self.width,
            self.height,
            self.dpi,
            f" ({card_name})" if card_name else "",
        )

    # -------------------------------------------------------------------------
    # Collection protocol
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    @property
    def custom_colors(self) -> Mapping[str, str]:
        return self.conf.custom_colors

    def __repr__(self) -> str:
        return f"Deck({self.size} cards, {self.width}x{self.height} px, {self.dpi} dpi)"

    # -------------------------------------------------------------------------
    # Drawing commands
    # -------------------------------------------------------------------------

    def background(self, **opts: Any) -> None:
        """
        Fill cards with a solid color.

        Options: range, layout, color.
        """
        kind = Background(self.custom_colors)
        card_range, layout = self._prepare("background", opts, (kind,))
        color = kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            self.cards[i].background(color[i])

    def png(self, **opts: Any) -> None:
        """
        Draw a raster image.

        Options: range, layout, file, x, y, width, height, alpha, blend, mask,
        angle, flip_horizontal, flip_vertical, crop_*. Cards whose file is
        None or empty are skipped.
        """
        ifile_kind = InputFile(self.conf.img_dir)
        paint_kind = Paint(self.custom_colors)
        trans_kind = Transform()
        box_kind = ScaleBox(self.width, self.height)
        card_range, layout = self._prepare(
            "png", opts, (ifile_kind, paint_kind, trans_kind, box_kind)
        )

        ifile = ifile_kind.load(opts, self.size, layout, self.dpi)
        box_kind.intrinsic_size = self._intrinsic_sizes(ifile.column("file"))
        box = box_kind.load(opts, self.size, layout, self.dpi)
        paint = paint_kind.load(opts, self.size, layout, self.dpi)
        trans = trans_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            file = ifile[i].file
            if file:
                self.cards[i].png(file, box[i], paint[i], trans[i])

    def svg(self, **opts: Any) -> None:
        """
        Draw an SVG document, or one element of it.

        Options: everything `png` takes, plus data, id, force_id. A card is
        skipped when it has neither file nor data, or when force_id is set
        and its id is empty.
        """
        ifile_kind = InputFile(self.conf.img_dir)
        svg_kind = SvgSpecial()
        paint_kind = Paint(self.custom_colors)
        trans_kind = Transform()
        box_kind = ScaleBox(self.width, self.height)
        card_range, layout = self._prepare(
            "svg", opts, (ifile_kind, svg_kind, paint_kind, trans_kind, box_kind)
        )

        ifile = ifile_kind.load(opts, self.size, layout, self.dpi)
        svg_args = svg_kind.load(opts, self.size, layout, self.dpi)
        box_kind.intrinsic_size = self._intrinsic_sizes(
            ifile.column("file"), svg_args.column("data")
        )
        box = box_kind.load(opts, self.size, layout, self.dpi)
        paint = paint_kind.load(opts, self.size, layout, self.dpi)
        trans = trans_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            if should_render_svg(svg_args[i], ifile[i].file):
                self.cards[i].svg(ifile[i].file, svg_args[i], box[i], paint[i], trans[i])

    def rect(self, **opts: Any) -> None:
        """
        Draw a rectangle, optionally with rounded corners.

        Options: range, layout, x, y, width, height, radius, x_radius,
        y_radius, fill_color, stroke_color, stroke_width, stroke_strategy,
        join, cap, dash.
        """
        box_kind = Box(self.width, self.height)
        draw_kind = Draw(self.custom_colors)
        card_range, layout = self._prepare("rect", opts, (box_kind, draw_kind))
        box = box_kind.load(opts, self.size, layout, self.dpi)
        draw = draw_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            self.cards[i].rect(box[i], draw[i])

    def circle(self, **opts: Any) -> None:
        """Draw a circle centered on (x, y)."""
        coords_kind = Coords()
        draw_kind = Draw(self.custom_colors)
        card_range, layout = self._prepare("circle", opts, (coords_kind, draw_kind))
        coords = coords_kind.load(opts, self.size, layout, self.dpi)
        draw = draw_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            self.cards[i].circle(coords[i], draw[i])

    def line(self, **opts: Any) -> None:
        """Draw a line from (x1, y1) to (x2, y2)."""
        coords_kind = Coords()
        draw_kind = Draw(self.custom_colors)
        card_range, layout = self._prepare("line", opts, (coords_kind, draw_kind))
        coords = coords_kind.load(opts, self.size, layout, self.dpi)
        draw = draw_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            self.cards[i].line(coords[i], draw[i])

    def text(self, **opts: Any) -> None:
        """
        Draw text inside a box.

        Options: range, layout, str, font, font_size, color, align, valign,
        spacing, x, y, width, height, angle.
        """
        text_kind = TextSpecial(self.custom_colors)
        box_kind = Box(self.width, self.height)
        trans_kind = Rotation()
        card_range, layout = self._prepare("text", opts, (text_kind, box_kind, trans_kind))
        text = text_kind.load(opts, self.size, layout, self.dpi)
        box = box_kind.load(opts, self.size, layout, self.dpi)
        trans = trans_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            self.cards[i].text(text[i], box[i], trans[i])

    def save_png(self, **opts: Any) -> None:
        """
        Write each card in range to its own PNG file.

        Options: range, dir, prefix, count_format, rotate. dir, prefix and
        count_format default to the deck configuration.
        """
        save_kind = SaveOptions(self.conf.dir, self.conf.prefix, self.conf.count_format)
        card_range, layout = self._prepare("save_png", opts, (save_kind,))
        save = save_kind.load(opts, self.size, layout, self.dpi)

        for i in card_range:
            self.cards[i].save_png(save[i])

    # -------------------------------------------------------------------------
    # Resolution helpers
    # -------------------------------------------------------------------------

    def _prepare(
        self,
        command: str,
        opts: Mapping[str, Any],
        kinds: tuple[OptionKind, ...],
    ) -> tuple[CardRange, LayoutEntries]:
        recognized = set(COMMAND_KEYS).union(*(kind.keys() for kind in kinds))
        unknown = sorted(set(opts) - recognized)
        if unknown:
            logger.warning("%s ignores unknown options: %s", command, ", ".join(unknown))

        card_range = resolve_range(opts.get("range"), self.size)
        layout = self._layout_entries(opts.get("layout"))
        logger.debug("%s on %d of %d cards", command, len(card_range), self.size)
        return card_range, layout

    def _layout_entries(self, names: Any) -> LayoutEntries:
        if is_per_card(names):
            if len(names) != self.size:
                raise ArityMismatchError("layout", self.size, len(names))
            return tuple(self.layout.lookup(name) for name in names)
        return self.layout.lookup(names)

    def _intrinsic_sizes(
        self,
        files: tuple[str | None, ...],
        data: tuple[str | None, ...] | None = None,
    ) -> IntrinsicSize:
        seen: dict[tuple[str | None, str | None], tuple[int, int] | None] = {}

        def intrinsic_size(index: int) -> tuple[int, int] | None:
            key = (files[index], data[index] if data else None)
            if key not in seen:
                seen[key] = image_size(key[0], key[1], dpi=self.dpi)
            return seen[key]

        return intrinsic_size


def _length(key: str, value: Any, dpi: float) -> int:
    pixels = to_pixels(value, dpi, key=key, allow_negative=False)
    if not isinstance(pixels, int):
        raise InvalidUnitError(key, value, "expected a length such as 825 or '2.5in'")
    return pixels
