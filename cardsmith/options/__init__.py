"""
cardsmith option kinds.

Per-card resolution of drawing command options.
"""

from cardsmith.options.base import (
    COMMAND_KEYS,
    OptionKind,
    OptionRow,
    ResolvedOptions,
    effective_raw,
    resolve_color,
)
from cardsmith.options.draw import Draw
from cardsmith.options.files import InputFile, SvgSpecial, should_render_svg
from cardsmith.options.geometry import Box, Coords, ScaleBox
from cardsmith.options.output import Background, SaveOptions
from cardsmith.options.paint import BLEND_MODES, Paint
from cardsmith.options.text import TextSpecial
from cardsmith.options.transform import Rotation, Transform

__all__ = [
    "BLEND_MODES",
    "COMMAND_KEYS",
    "Background",
    "Box",
    "Coords",
    "Draw",
    "InputFile",
    "OptionKind",
    "OptionRow",
    "Paint",
    "ResolvedOptions",
    "Rotation",
    "SaveOptions",
    "ScaleBox",
    "SvgSpecial",
    "TextSpecial",
    "Transform",
    "effective_raw",
    "resolve_color",
    "should_render_svg",
]
