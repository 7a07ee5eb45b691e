from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from cardsmith.config import Conf
from cardsmith.deck import Deck
from cardsmith.render.recording import RecordingSink

SAMPLE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="1in" height="0.5in">
  <rect id="back" x="0" y="0" width="100" height="50" fill="navy"/>
  <circle id="spot" cx="25" cy="25" r="10" fill="gold"/>
</svg>"""


@pytest.fixture
def conf(tmp_path: Path) -> Conf:
    """Deck configuration with images resolved from tmp_path."""
    return Conf(
        custom_colors={"brand": "#336699"},
        img_dir=str(tmp_path),
        dir=str(tmp_path / "_output"),
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_deck(conf: Conf, sink: RecordingSink) -> Callable[..., Deck]:
    """Build decks that record drawing calls instead of rasterizing."""

    def build(cards: int = 3, **kwargs: Any) -> Deck:
        kwargs.setdefault("conf", conf)
        kwargs.setdefault("sink", sink)
        return Deck(cards=cards, **kwargs)

    return build


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    """A 40x20 red PNG in the image directory."""
    path = tmp_path / "red.png"
    Image.new("RGBA", (40, 20), (255, 0, 0, 255)).save(path)
    return path


@pytest.fixture
def svg_data() -> str:
    """A 1in x 0.5in SVG document with two identified elements."""
    return SAMPLE_SVG


@pytest.fixture
def svg_file(tmp_path: Path, svg_data: str) -> Path:
    path = tmp_path / "shapes.svg"
    path.write_text(svg_data, encoding="utf-8")
    return path
