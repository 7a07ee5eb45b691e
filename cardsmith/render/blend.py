"""
Blend modes.

Every blend mode the paint options accept, as a function of two RGB images:
the card underneath (backdrop) and the image being drawn (source). Alpha is
handled by the caller.

Modes Pillow ships (multiply, screen, ...) use ImageChops. The rest follow
the W3C compositing formulas, computed on float channels in [0, 1] with
numpy. The hsl_* modes are non-separable: they mix hue, saturation and
luminosity of the two images rather than working channel by channel.
"""

from collections.abc import Callable

import numpy as np
from PIL import Image, ImageChops

BlendOp = Callable[[Image.Image, Image.Image], Image.Image]
Channels = np.ndarray


def _array_op(fn: Callable[[Channels, Channels], Channels]) -> BlendOp:
    def op(backdrop: Image.Image, source: Image.Image) -> Image.Image:
        cb = np.asarray(backdrop.convert("RGB"), dtype=np.float64) / 255.0
        cs = np.asarray(source.convert("RGB"), dtype=np.float64) / 255.0
        mixed = np.clip(fn(cb, cs), 0.0, 1.0)
        return Image.fromarray(np.rint(mixed * 255.0).astype(np.uint8))

    op.__name__ = fn.__name__
    return op


# -----------------------------------------------------------------------------
# Separable modes
# -----------------------------------------------------------------------------


def color_dodge(cb: Channels, cs: Channels) -> Channels:
    with np.errstate(divide="ignore", invalid="ignore"):
        dodged = np.minimum(1.0, cb / (1.0 - cs))
    return np.where(cb == 0.0, 0.0, np.where(cs >= 1.0, 1.0, dodged))


def color_burn(cb: Channels, cs: Channels) -> Channels:
    with np.errstate(divide="ignore", invalid="ignore"):
        burned = 1.0 - np.minimum(1.0, (1.0 - cb) / cs)
    return np.where(cb >= 1.0, 1.0, np.where(cs == 0.0, 0.0, burned))


def exclusion(cb: Channels, cs: Channels) -> Channels:
    return cb + cs - 2.0 * cb * cs


# -----------------------------------------------------------------------------
# Non-separable modes
# -----------------------------------------------------------------------------


def _lum(c: Channels) -> Channels:
    return (0.3 * c[..., 0] + 0.59 * c[..., 1] + 0.11 * c[..., 2])[..., None]


def _sat(c: Channels) -> Channels:
    return c.max(axis=-1, keepdims=True) - c.min(axis=-1, keepdims=True)


def _clip_color(c: Channels) -> Channels:
    lum = _lum(c)
    low = c.min(axis=-1, keepdims=True)
    high = c.max(axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        c = np.where(low < 0.0, lum + (c - lum) * lum / (lum - low), c)
        c = np.where(high > 1.0, lum + (c - lum) * (1.0 - lum) / (high - lum), c)
    return c


def _set_lum(c: Channels, lum: Channels) -> Channels:
    return _clip_color(c + (lum - _lum(c)))


def _set_sat(c: Channels, sat: Channels) -> Channels:
    low = c.min(axis=-1, keepdims=True)
    span = c.max(axis=-1, keepdims=True) - low
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(span > 0.0, (c - low) * sat / span, 0.0)


def hsl_hue(cb: Channels, cs: Channels) -> Channels:
    return _set_lum(_set_sat(cs, _sat(cb)), _lum(cb))


def hsl_saturation(cb: Channels, cs: Channels) -> Channels:
    return _set_lum(_set_sat(cb, _sat(cs)), _lum(cb))


def hsl_color(cb: Channels, cs: Channels) -> Channels:
    return _set_lum(cs, _lum(cb))


def hsl_luminosity(cb: Channels, cs: Channels) -> Channels:
    return _set_lum(cb, _lum(cs))


BLEND_OPS: dict[str, BlendOp] = {
    "multiply": ImageChops.multiply,
    "screen": ImageChops.screen,
    "overlay": ImageChops.overlay,
    "darken": ImageChops.darker,
    "lighten": ImageChops.lighter,
    "difference": ImageChops.difference,
    "soft_light": ImageChops.soft_light,
    "hard_light": ImageChops.hard_light,
    "color_dodge": _array_op(color_dodge),
    "color_burn": _array_op(color_burn),
    "exclusion": _array_op(exclusion),
    "hsl_hue": _array_op(hsl_hue),
    "hsl_saturation": _array_op(hsl_saturation),
    "hsl_color": _array_op(hsl_color),
    "hsl_luminosity": _array_op(hsl_luminosity),
}


def blend(mode: str, backdrop: Image.Image, source: Image.Image) -> Image.Image:
    """
    Blend two RGB images.

    Raises:
        KeyError: If the mode is unknown (paint options reject these earlier)
    """
    return BLEND_OPS[mode](backdrop.convert("RGB"), source.convert("RGB"))
