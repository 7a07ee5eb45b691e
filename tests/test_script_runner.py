"""Tests for deck scripts."""

from pathlib import Path

import pytest

from cardsmith.config import Conf
from cardsmith.models.failure import (
    ArityMismatchError,
    ConfigError,
    InvalidOptionError,
    UnknownPresetError,
)
from cardsmith.render.recording import RecordingSink
from cardsmith.services.script_runner import build_deck, load_script, run_commands, run_script

SCRIPT = """
deck:
  width: 1in
  height: 2in
  cards: 3
  layout: layout.yml
commands:
  - background: {color: white}
  - text:
      str: [A, B, C]
      layout: title
  - rect: {range: [0, 2], x: 10}
  - save_png:
"""


@pytest.fixture
def script_file(tmp_path: Path) -> Path:
    (tmp_path / "layout.yml").write_text("title:\n  x: 7\n  font_size: 20\n", encoding="utf-8")
    path = tmp_path / "deck.yml"
    path.write_text(SCRIPT, encoding="utf-8")
    return path


class TestRunScript:
    def test_runs_commands_in_order(self, script_file: Path, sink: RecordingSink) -> None:
        deck = run_script(script_file, sink=sink)

        assert len(deck) == 3
        assert (deck.width, deck.height) == (300, 600)
        commands = [call.command for call in sink.calls]
        assert commands == ["background"] * 3 + ["text"] * 3 + ["rect"] * 2 + ["save_png"] * 3

    def test_layout_relative_to_script(self, script_file: Path, sink: RecordingSink) -> None:
        run_script(script_file, sink=sink)

        assert sink.values("text", "x") == [7, 7, 7]
        assert sink.values("text", "str") == ["A", "B", "C"]

    def test_mapping_script(self, sink: RecordingSink) -> None:
        deck = run_script(
            {"deck": {"cards": 2, "conf": Conf()}, "commands": [{"circle": {"radius": [1, 2]}}]},
            sink=sink,
        )

        assert len(deck) == 2
        assert sink.values("circle", "radius") == [1, 2]

    def test_preset_deck(self, sink: RecordingSink) -> None:
        deck = run_script(
            {"deck": {"preset": "poker", "vendor": "the_game_crafter", "conf": Conf()}},
            sink=sink,
        )

        assert deck.card_name == "poker"
        assert deck.vendor == "the_game_crafter"
        assert deck.width == 826

    def test_unknown_preset(self, sink: RecordingSink) -> None:
        with pytest.raises(UnknownPresetError):
            run_script({"deck": {"preset": "hexagon"}}, sink=sink)

    def test_resolution_error_propagates(self, sink: RecordingSink) -> None:
        with pytest.raises(ArityMismatchError):
            run_script(
                {"deck": {"cards": 3, "conf": Conf()}, "commands": [{"rect": {"x": [1, 2]}}]},
                sink=sink,
            )

    def test_no_commands(self, sink: RecordingSink) -> None:
        deck = run_script({"deck": {"cards": 1, "conf": Conf()}}, sink=sink)

        assert len(deck) == 1
        assert sink.calls == []


class TestRunCommands:
    @pytest.fixture
    def deck(self, sink: RecordingSink):
        return build_deck({"cards": 1, "conf": Conf()}, sink=sink)

    def test_unknown_command(self, deck) -> None:
        with pytest.raises(InvalidOptionError, match="unknown command"):
            run_commands(deck, [{"explode": {}}])

    def test_entry_must_be_single_mapping(self, deck) -> None:
        with pytest.raises(InvalidOptionError):
            run_commands(deck, [{"rect": {}, "line": {}}])
        with pytest.raises(InvalidOptionError):
            run_commands(deck, ["rect"])

    def test_commands_must_be_list(self, deck) -> None:
        with pytest.raises(InvalidOptionError):
            run_commands(deck, {"rect": {}})

    def test_options_must_be_mapping(self, deck) -> None:
        with pytest.raises(InvalidOptionError):
            run_commands(deck, [{"rect": [1, 2]}])

    def test_returns_count(self, deck) -> None:
        assert run_commands(deck, [{"rect": None}, {"line": {}}]) == 2


class TestBuildDeck:
    def test_vendor_needs_preset(self) -> None:
        with pytest.raises(InvalidOptionError):
            build_deck({"vendor": "the_game_crafter", "conf": Conf()})


class TestLoadScript:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_script(tmp_path / "nope.yml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "deck.yml"
        path.write_text("- background\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_script(path)
