"""Tests for blend modes."""

import numpy as np
import pytest
from PIL import Image

from cardsmith.options.paint import BLEND_MODES
from cardsmith.render.blend import (
    BLEND_OPS,
    blend,
    color_burn,
    color_dodge,
    hsl_color,
    hsl_hue,
)


def solid(color: tuple[int, int, int]) -> Image.Image:
    return Image.new("RGB", (2, 2), color)


class TestBlendOps:
    def test_every_paint_mode_has_an_op(self) -> None:
        """Only 'none' skips blending; every other accepted mode is implemented."""
        assert set(BLEND_OPS) | {"none"} == BLEND_MODES

    def test_color_dodge_edges(self) -> None:
        cb = np.array([[[0.0, 0.5, 0.5]]])
        cs = np.array([[[1.0, 1.0, 0.5]]])

        assert color_dodge(cb, cs).tolist() == [[[0.0, 1.0, 1.0]]]

    def test_color_burn_edges(self) -> None:
        cb = np.array([[[1.0, 0.5, 0.75]]])
        cs = np.array([[[0.0, 0.0, 0.5]]])

        assert color_burn(cb, cs).tolist() == [[[1.0, 0.0, 0.5]]]

    def test_hsl_color_keeps_backdrop_luminosity(self) -> None:
        cb = np.array([[[0.5, 0.5, 0.5]]])
        cs = np.array([[[1.0, 0.0, 0.0]]])

        mixed = hsl_color(cb, cs)
        lum = 0.3 * mixed[..., 0] + 0.59 * mixed[..., 1] + 0.11 * mixed[..., 2]
        assert lum == pytest.approx(0.5)
        assert mixed[0, 0, 0] > mixed[0, 0, 1]
        assert mixed[0, 0, 1] == pytest.approx(mixed[0, 0, 2])

    def test_hsl_hue_of_gray_source_is_gray(self) -> None:
        """A gray source has no hue to give; the result is gray."""
        cb = np.array([[[1.0, 0.0, 0.0]]])
        cs = np.array([[[0.5, 0.5, 0.5]]])

        mixed = hsl_hue(cb, cs)[0, 0]
        assert mixed[0] == pytest.approx(mixed[1])
        assert mixed[1] == pytest.approx(mixed[2])

    def test_blend_images(self) -> None:
        mixed = blend("exclusion", solid((255, 255, 255)), solid((255, 0, 0)))

        assert mixed.mode == "RGB"
        assert mixed.getpixel((0, 0)) == (0, 255, 255)

    def test_unknown_mode(self) -> None:
        with pytest.raises(KeyError):
            blend("dissolve", solid((0, 0, 0)), solid((0, 0, 0)))
