"""End-to-end tests for deck construction and drawing commands."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from cardsmith.config import Conf
from cardsmith.deck import Deck
from cardsmith.models.card import Card
from cardsmith.models.failure import (
    ArityMismatchError,
    InputFileNotFoundError,
    InvalidOptionError,
    InvalidUnitError,
    RangeOutOfBoundsError,
    ResolutionError,
)
from cardsmith.render.recording import RecordingSink

MakeDeck = Callable[..., Deck]


class TestDeckConstruction:
    """Tests for deck geometry and cards."""

    def test_defaults(self, make_deck: MakeDeck) -> None:
        deck = make_deck(cards=1)

        assert (deck.width, deck.height) == (825, 1125)
        assert deck.dpi == 300
        assert len(deck) == 1

    def test_physical_size(self, make_deck: MakeDeck) -> None:
        deck = make_deck(width="2.5in", height="3.5in")
        assert (deck.width, deck.height) == (750, 1050)

    def test_bleed_added_on_both_sides(self, make_deck: MakeDeck) -> None:
        """Width and height are trimmed sizes; bleed extends every side."""
        deck = make_deck(width="2.5in", height="3.5in", bleed="0.1in")

        assert deck.bleed == 30
        assert (deck.width, deck.height) == (810, 1110)

    def test_dpi_drives_conversion(self, make_deck: MakeDeck) -> None:
        deck = make_deck(width="1in", height="2in", dpi=150)
        assert (deck.width, deck.height) == (150, 300)

    def test_dpi_from_config(self, sink: RecordingSink) -> None:
        deck = Deck(width="1in", height="1in", conf=Conf(dpi=72), sink=sink)
        assert deck.width == 72

    def test_cards_indexed_in_order(self, make_deck: MakeDeck) -> None:
        deck = make_deck(cards=4)

        assert [card.index for card in deck] == [0, 1, 2, 3]
        assert isinstance(deck[2], Card)
        assert deck[2].deck is deck

    def test_empty_deck(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        deck = make_deck(cards=0)
        deck.rect(x=10)

        assert len(deck) == 0
        assert sink.calls == []

    @pytest.mark.parametrize("cards", [-1, 2.5, "3", True])
    def test_invalid_card_count(self, make_deck: MakeDeck, cards: object) -> None:
        with pytest.raises(InvalidOptionError):
            make_deck(cards=cards)

    @pytest.mark.parametrize(
        "kwargs",
        [{"width": "-1in"}, {"height": "native"}, {"bleed": "2furlongs"}, {"dpi": 0}],
    )
    def test_invalid_geometry(self, make_deck: MakeDeck, kwargs: dict) -> None:
        with pytest.raises(InvalidUnitError):
            make_deck(**kwargs)

    def test_config_file(self, tmp_path: Path, sink: RecordingSink) -> None:
        config = tmp_path / "config.yml"
        config.write_text("dpi: 100\ncustom_colors:\n  felt: '#0a5c36'\n", encoding="utf-8")

        deck = Deck(width="1in", config=config, sink=sink)
        deck.background(color="felt")

        assert deck.width == 100
        assert sink.values("background", "color") == ["#0a5c36"]

    def test_default_sink_is_pillow(self, conf: Conf) -> None:
        from cardsmith.render.pillow_sink import PillowSink

        deck = Deck(cards=2, width=10, height=10, conf=conf)
        assert isinstance(deck.sink, PillowSink)


class TestBroadcasting:
    """Scalar and per-card values across a whole command."""

    def test_scalar_broadcast(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        """x: 10 on three cards gives [10, 10, 10]."""
        make_deck(cards=3).rect(x=10, range="all")
        assert sink.values("rect", "x") == [10, 10, 10]

    def test_per_card_values(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        """x: [0, 100, 200] on three cards gives [0, 100, 200]."""
        make_deck(cards=3).rect(x=[0, 100, 200], range="all")
        assert sink.values("rect", "x") == [0, 100, 200]

    def test_arity_mismatch(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        """x: [0, 100] on three cards names x, expected 3, got 2."""
        with pytest.raises(ArityMismatchError) as exc_info:
            make_deck(cards=3).rect(x=[0, 100], range="all")

        assert exc_info.value.key == "x"
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert sink.calls == []

    def test_per_card_value_indexed_by_card(
        self, make_deck: MakeDeck, sink: RecordingSink
    ) -> None:
        """Cards in range take their own element, not the range position."""
        make_deck(cards=3).rect(x=[0, 100, 200], range=[2, 0])

        assert [call.index for call in sink.for_command("rect")] == [2, 0]
        assert sink.values("rect", "x") == [200, 0]

    def test_units_per_card(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=2).circle(x=["1in", "2in"], radius="0.1in")

        assert sink.values("circle", "x") == [300, 600]
        assert sink.values("circle", "radius") == [30, 30]


class TestRanges:
    def test_only_selected_cards_drawn(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=5).line(range=[4, 1, 1])
        assert [call.index for call in sink.calls] == [4, 1, 1]

    def test_single_index(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=5).background(range=3)
        assert [call.index for call in sink.calls] == [3]

    def test_empty_range_is_noop(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=3).background(range=[])
        assert sink.calls == []

    def test_out_of_bounds(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        with pytest.raises(RangeOutOfBoundsError):
            make_deck(cards=3).background(range=[0, 3])
        assert sink.calls == []


class TestAtomicResolution:
    """A failing command draws nothing, even on cards that resolved."""

    def test_bad_value_on_last_card(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        with pytest.raises(InvalidUnitError):
            make_deck(cards=3).rect(width=[10, 20, "30furlongs"])
        assert sink.calls == []

    def test_second_kind_fails(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        """Geometry resolves, then the draw options fail: still nothing drawn."""
        with pytest.raises(ResolutionError):
            make_deck(cards=2).rect(x=5, join="pointy")
        assert sink.calls == []

    def test_missing_input_file(
        self, make_deck: MakeDeck, png_file: Path, sink: RecordingSink
    ) -> None:
        with pytest.raises(InputFileNotFoundError):
            make_deck(cards=2).png(file=[png_file.name, "missing.png"])
        assert sink.calls == []

    def test_explicit_none_length(
        self, make_deck: MakeDeck, png_file: Path, sink: RecordingSink
    ) -> None:
        """None is not a length for keys that have one by default."""
        with pytest.raises(InvalidUnitError) as exc_info:
            make_deck(cards=1).png(file=png_file.name, width="scale", height=None)
        assert exc_info.value.key == "height"

        with pytest.raises(InvalidUnitError):
            make_deck(cards=2).rect(x=[10, None])
        assert sink.calls == []

    def test_none_radius_is_unset(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=1).rect(radius=None, x_radius=4)
        assert sink.calls[0].params["x_radius"] == 4


class TestLayouts:
    """Layout entries supply defaults below explicit options."""

    LAYOUT = {
        "title": {"x": 50, "y": 60, "font_size": 48, "align": "center"},
        "art": {"x": 100, "width": 300},
    }

    def test_layout_defaults(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=2, layout=self.LAYOUT).text(str="Hi", layout="title")

        call = sink.calls[0]
        assert (call.params["x"], call.params["y"]) == (50, 60)
        assert call.params["font_size"] == 48
        assert call.params["align"] == "center"

    def test_precedence(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        """Explicit > layout > default, key by key."""
        make_deck(cards=1, layout=self.LAYOUT).text(layout="title", y=5)

        params = sink.calls[0].params
        assert params["y"] == 5
        assert params["x"] == 50
        assert params["valign"] == "top"

    def test_missing_entry_falls_back(
        self, make_deck: MakeDeck, sink: RecordingSink, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A missing entry is a warning, not an error."""
        with caplog.at_level(logging.WARNING):
            make_deck(cards=1, layout=self.LAYOUT).rect(layout="nope")

        assert sink.values("rect", "x") == [0]
        assert "nope" in caplog.text

    def test_per_card_layout_names(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=2, layout=self.LAYOUT).rect(layout=["title", "art"])

        assert sink.values("rect", "x") == [50, 100]
        assert sink.values("rect", "width") == [825, 300]

    def test_per_card_layout_arity(self, make_deck: MakeDeck) -> None:
        with pytest.raises(ArityMismatchError) as exc_info:
            make_deck(cards=3, layout=self.LAYOUT).rect(layout=["title", "art"])
        assert exc_info.value.key == "layout"

    def test_bundled_layout(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        """top_index extends bonus_index in the bundled playing_card layout."""
        make_deck(cards=1, layout="playing_card").text(str="A", layout="top_index")

        params = sink.calls[0].params
        assert (params["x"], params["y"]) == (50, 50)
        assert params["width"] == 100
        assert params["align"] == "center"


class TestCommands:
    """Each command hands fully resolved rows to the sink."""

    def test_background(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=2).background(color=["brand", "red"])
        assert sink.values("background", "color") == ["#336699", "red"]

    def test_png_native_size(
        self, make_deck: MakeDeck, png_file: Path, sink: RecordingSink
    ) -> None:
        make_deck(cards=1).png(file="red.png", x=5)

        call = sink.calls[0]
        assert call.params["file"] == str(png_file)
        assert (call.params["width"], call.params["height"]) == (40, 20)
        assert call.params["x"] == 5
        assert call.params["blend"] == "none"

    def test_png_scale(self, make_deck: MakeDeck, png_file: Path, sink: RecordingSink) -> None:
        make_deck(cards=1).png(file="red.png", width=100, height="scale")
        assert sink.values("png", "height") == [50]

    def test_png_skips_cards_without_file(
        self, make_deck: MakeDeck, png_file: Path, sink: RecordingSink
    ) -> None:
        make_deck(cards=3).png(file=["red.png", None, ""])
        assert [call.index for call in sink.calls] == [0]

    def test_svg_from_file(self, make_deck: MakeDeck, svg_file: Path, sink: RecordingSink) -> None:
        make_deck(cards=1).svg(file="shapes.svg", id="spot")

        params = sink.calls[0].params
        assert params["id"] == "#spot"
        assert (params["width"], params["height"]) == (300, 150)

    def test_svg_inline_data(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        data = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 32"></svg>'
        make_deck(cards=2).svg(data=[data, None])

        assert [call.index for call in sink.calls] == [0]
        assert (sink.calls[0].params["width"], sink.calls[0].params["height"]) == (64, 32)

    def test_svg_relative_units(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        data = (
            '<svg xmlns="http://www.w3.org/2000/svg" width="10em" height="10em"'
            ' viewBox="0 0 40 40"/>'
        )
        make_deck(cards=1).svg(data=data)

        assert (sink.calls[0].params["width"], sink.calls[0].params["height"]) == (40, 40)

    def test_svg_force_id(self, make_deck: MakeDeck, svg_file: Path, sink: RecordingSink) -> None:
        make_deck(cards=2).svg(file="shapes.svg", id=["back", None], force_id=True)
        assert [call.index for call in sink.calls] == [0]

    def test_rect(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=1).rect(x="0.1in", radius=8, fill_color="brand", dash="3 1")

        params = sink.calls[0].params
        assert params["x"] == 30
        assert (params["x_radius"], params["y_radius"]) == (8, 8)
        assert params["fill_color"] == "#336699"
        assert params["dash"] == (3, 1)

    def test_circle_and_line(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        deck = make_deck(cards=1)
        deck.circle(x=10, y=20, radius=5)
        deck.line(x1=0, y1=0, x2="1in", y2="1in", stroke_width=4)

        assert sink.for_command("circle")[0].params["radius"] == 5
        line = sink.for_command("line")[0].params
        assert (line["x2"], line["y2"], line["stroke_width"]) == (300, 300, 4)

    def test_text(self, make_deck: MakeDeck, sink: RecordingSink) -> None:
        make_deck(cards=3).text(str=["A", "2", "3"], color="brand", angle=0.5)

        assert sink.values("text", "str") == ["A", "2", "3"]
        assert sink.values("text", "color") == ["#336699"] * 3
        assert sink.values("text", "angle") == [0.5] * 3

    def test_text_ignores_image_transforms(
        self, make_deck: MakeDeck, sink: RecordingSink, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Text only rotates; crop and flip options are unknown to it."""
        with caplog.at_level(logging.WARNING):
            make_deck(cards=1).text(str="A", crop_x=5, flip_vertical=True)

        assert "crop_x" in caplog.text
        assert "flip_vertical" in caplog.text
        assert "crop_x" not in sink.calls[0].params

    def test_save_png_paths(self, make_deck: MakeDeck, conf: Conf, sink: RecordingSink) -> None:
        make_deck(cards=2).save_png(prefix="hero_")

        assert sink.values("save_png", "path") == [
            str(Path(conf.dir) / "hero_00.png"),
            str(Path(conf.dir) / "hero_01.png"),
        ]

    def test_unknown_option_warns(
        self, make_deck: MakeDeck, sink: RecordingSink, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            make_deck(cards=1).rect(colour="red")

        assert "colour" in caplog.text
        assert len(sink.calls) == 1

    def test_options_not_mutated(self, make_deck: MakeDeck) -> None:
        opts = {"x": [1, 2], "range": [0, 1]}
        make_deck(cards=2).rect(**opts)
        assert opts == {"x": [1, 2], "range": [0, 1]}
