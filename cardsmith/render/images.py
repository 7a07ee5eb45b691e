"""
Intrinsic image sizes.

Raster images are measured with Pillow. SVG documents are measured from the
root element's width and height attributes, converted with the deck DPI
when they carry physical units; without them the viewBox is used.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from PIL import Image

from cardsmith.models.failure import InvalidOptionError, InvalidUnitError
from cardsmith.services.units import round_pixels, to_pixels

SVG_SUFFIXES: frozenset[str] = frozenset({".svg"})


def raster_size(path: str) -> tuple[int, int]:
    """Width and height of a raster image in pixels."""
    with Image.open(path) as img:
        return img.size


def svg_size(data: str, dpi: float) -> tuple[int, int] | None:
    """
    Width and height of an SVG document in pixels.

    Returns None if the document states no usable size.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ValueError(f"Invalid SVG data: {e}") from e

    width = _svg_length(root.get("width"), dpi)
    height = _svg_length(root.get("height"), dpi)
    if width is not None and height is not None:
        return width, height

    view_box = root.get("viewBox")
    if view_box:
        parts = view_box.replace(",", " ").split()
        if len(parts) == 4:
            return round_pixels(float(parts[2])), round_pixels(float(parts[3]))
    return None


def _svg_length(value: str | None, dpi: float) -> int | None:
    if value is None or value.strip().endswith("%"):
        return None
    try:
        pixels = to_pixels(value, dpi, allow_negative=False)
    except InvalidUnitError:
        # em, ex and other relative units: fall back to the viewBox
        return None
    return pixels if isinstance(pixels, int) else None


def image_size(
    file: str | None = None,
    data: str | None = None,
    dpi: float = 300,
) -> tuple[int, int] | None:
    """
    Intrinsic size of a card's image.

    Inline SVG data wins over a file. Returns None when there is no image.

    Raises:
        InvalidOptionError: If the image cannot be read
    """
    key = "data" if data else "file"
    try:
        if data:
            return svg_size(data, dpi)
        if not file:
            return None
        if Path(file).suffix.lower() in SVG_SUFFIXES:
            return svg_size(Path(file).read_text(encoding="utf-8"), dpi)
        return raster_size(file)
    except (OSError, ValueError) as e:
        raise InvalidOptionError(key, file if key == "file" else "<svg data>", str(e)) from e
