"""Tests for command line jobs."""

from pathlib import Path

import pytest

from cardsmith.jobs import list_presets, render_deck
from cardsmith.services.preset_factory import default_factory


@pytest.fixture
def script(tmp_path: Path) -> Path:
    path = tmp_path / "deck.yml"
    path.write_text(
        f"""
deck:
  width: 20
  height: 30
  cards: 2
commands:
  - background: {{color: [red, blue]}}
  - save_png: {{dir: {tmp_path / "out"}}}
""",
        encoding="utf-8",
    )
    return path


class TestListPresets:
    def test_lists_presets(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert list_presets.main([]) == 0

        out = capsys.readouterr().out
        assert "poker" in out
        assert "the_game_crafter" in out

    def test_check_known(self) -> None:
        assert list_presets.main(["--check", "poker"]) == 0

    def test_check_unknown(self) -> None:
        assert list_presets.main(["--check", "hexagon"]) == 1

    def test_check_vendor(self) -> None:
        assert list_presets.main(["--check", "poker", "--vendor", "the_game_crafter"]) == 0
        assert list_presets.main(["--check", "poker", "--vendor", "acme"]) == 1

    def test_check_preset(self) -> None:
        factory = default_factory()

        assert list_presets.check_preset(factory, "bridge")
        assert not list_presets.check_preset(factory, "bridge", "acme")

    def test_format_presets(self) -> None:
        lines = list_presets.format_presets(default_factory())
        assert len(lines) == len(default_factory().names())


class TestRenderDeck:
    def test_dry_run_writes_nothing(self, script: Path, tmp_path: Path) -> None:
        assert render_deck.render(script, dry_run=True) == 4
        assert not (tmp_path / "out").exists()

    def test_renders_pngs(self, script: Path, tmp_path: Path) -> None:
        assert render_deck.main([str(script)]) == 0
        assert sorted(p.name for p in (tmp_path / "out").iterdir()) == [
            "card_00.png",
            "card_01.png",
        ]

    def test_known_failure_exit_code(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("deck:\n  cards: 2\ncommands:\n  - rect: {x: [1, 2, 3]}\n", encoding="utf-8")

        assert render_deck.main([str(bad), "--dry-run"]) == 1

    def test_missing_script(self, tmp_path: Path) -> None:
        assert render_deck.main([str(tmp_path / "nope.yml")]) == 1
