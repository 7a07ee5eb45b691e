"""
Pillow rendering sink.

Rasterizes each card into its own RGBA image. SVG documents are rasterized
with cairosvg, imported only when the first SVG is drawn since it needs the
system cairo library.

Limitations of this backend:
- dash patterns are drawn solid
- rectangles use one corner radius (the x radius)
"""

import io
import logging
import math
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw, ImageFont

from cardsmith.options.base import OptionRow
from cardsmith.render.blend import blend as blend_images

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


class PillowSink:
    """
    Sink drawing onto one Pillow image per card.

    Usage:
        sink = PillowSink(825, 1125, 3)
        deck = Deck(cards=3, sink=sink)
        deck.background(color="white")
        sink.image(0).show()
    """

    def __init__(self, width: int, height: int, count: int) -> None:
        self.width = width
        self.height = height
        self._images = [Image.new("RGBA", (width, height), TRANSPARENT) for _ in range(count)]

    def image(self, index: int) -> Image.Image:
        return self._images[index]

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def background(self, index: int, color: OptionRow) -> None:
        layer = Image.new("RGBA", (self.width, self.height), color.color)
        self._images[index].alpha_composite(layer)

    def png(
        self,
        index: int,
        file: str,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        with Image.open(file) as src:
            img = src.convert("RGBA")
        self._place(index, img, box, paint, trans)

    def svg(
        self,
        index: int,
        file: str | None,
        svg_args: OptionRow,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        import cairosvg

        data = svg_args.data if svg_args.data else Path(file or "").read_text(encoding="utf-8")
        if svg_args.id:
            data = _isolate_element(data, svg_args.id[1:])

        png_bytes = cairosvg.svg2png(
            bytestring=data.encode("utf-8"),
            output_width=box.width,
            output_height=box.height,
        )
        img = Image.open(io.BytesIO(png_bytes)).convert("RGBA")
        self._place(index, img, box, paint, trans)

    def rect(self, index: int, box: OptionRow, draw: OptionRow) -> None:
        xy = (box.x, box.y, box.x + box.width, box.y + box.height)
        radius = box.x_radius or 0

        def shape(d: ImageDraw.ImageDraw, fill: str | None, outline: str | None) -> None:
            d.rounded_rectangle(
                xy, radius=radius, fill=fill, outline=outline, width=draw.stroke_width
            )

        self._draw_shape(index, draw, shape)

    def circle(self, index: int, coords: OptionRow, draw: OptionRow) -> None:
        r = coords.radius
        xy = (coords.x - r, coords.y - r, coords.x + r, coords.y + r)

        def shape(d: ImageDraw.ImageDraw, fill: str | None, outline: str | None) -> None:
            d.ellipse(xy, fill=fill, outline=outline, width=draw.stroke_width)

        self._draw_shape(index, draw, shape)

    def line(self, index: int, coords: OptionRow, draw: OptionRow) -> None:
        layer = Image.new("RGBA", (self.width, self.height), TRANSPARENT)
        ImageDraw.Draw(layer).line(
            [(coords.x1, coords.y1), (coords.x2, coords.y2)],
            fill=draw.stroke_color,
            width=draw.stroke_width,
        )
        self._images[index].alpha_composite(layer)

    def text(self, index: int, text: OptionRow, box: OptionRow, trans: OptionRow) -> None:
        font = _load_font(text.font, text.font_size)
        layer = Image.new("RGBA", (box.width, box.height), TRANSPARENT)
        d = ImageDraw.Draw(layer)

        left, top, right, bottom = d.multiline_textbbox(
            (0, 0), text.str, font=font, spacing=text.spacing, align=text.align
        )
        text_width, text_height = right - left, bottom - top
        x = {"left": 0, "center": (box.width - text_width) // 2, "right": box.width - text_width}
        y = {
            "top": 0,
            "middle": (box.height - text_height) // 2,
            "bottom": box.height - text_height,
        }
        d.multiline_text(
            (x[text.align] - left, y[text.valign] - top),
            text.str,
            font=font,
            fill=text.color,
            spacing=text.spacing,
            align=text.align,
        )

        if trans.angle:
            layer = _rotate(layer, trans.angle)
        self._composite(index, layer, box.x, box.y, "none")

    def save_png(self, index: int, save: OptionRow) -> None:
        img = self._images[index]
        if save.rotate == "clockwise":
            img = img.transpose(Image.Transpose.ROTATE_270)
        elif save.rotate == "counterclockwise":
            img = img.transpose(Image.Transpose.ROTATE_90)

        path = Path(save.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        img.save(path, format="PNG")
        logger.debug("Saved card %d to %s", index, path)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _place(
        self,
        index: int,
        img: Image.Image,
        box: OptionRow,
        paint: OptionRow,
        trans: OptionRow,
    ) -> None:
        img = _crop(img, trans)
        if trans.flip_horizontal:
            img = img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        if trans.flip_vertical:
            img = img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)

        size = (box.width or img.width, box.height or img.height)
        if size != img.size:
            img = img.resize(size, Image.Resampling.LANCZOS)

        if paint.mask:
            colored = Image.new("RGBA", img.size, paint.mask)
            colored.putalpha(ImageChops.multiply(img.getchannel("A"), colored.getchannel("A")))
            img = colored
        if paint.alpha < 1.0:
            img.putalpha(img.getchannel("A").point(lambda a: round(a * paint.alpha)))

        if trans.angle:
            img = _rotate(img, trans.angle)

        self._composite(index, img, box.x, box.y, paint.blend)

    def _composite(self, index: int, img: Image.Image, x: int, y: int, blend: str) -> None:
        base = self._images[index]
        layer = Image.new("RGBA", base.size, TRANSPARENT)
        layer.paste(img, (x, y))

        if blend != "none":
            mixed = blend_images(blend, base, layer).convert("RGBA")
            mixed.putalpha(layer.getchannel("A"))
            layer = mixed

        base.alpha_composite(layer)

    def _draw_shape(
        self,
        index: int,
        draw: OptionRow,
        shape: Callable[[ImageDraw.ImageDraw, str | None, str | None], None],
    ) -> None:
        if draw.dash:
            logger.debug("PillowSink draws dash pattern %s as a solid stroke", draw.dash)

        layer = Image.new("RGBA", (self.width, self.height), TRANSPARENT)
        d = ImageDraw.Draw(layer)
        outline = draw.stroke_color if draw.stroke_width > 0 else None
        if draw.stroke_strategy == "stroke_first":
            shape(d, None, outline)
            shape(d, draw.fill_color, None)
        else:
            shape(d, draw.fill_color, outline)
        self._images[index].alpha_composite(layer)


def _crop(img: Image.Image, trans: OptionRow) -> Image.Image:
    width = img.width - trans.crop_x if trans.crop_width == "native" else trans.crop_width
    height = img.height - trans.crop_y if trans.crop_height == "native" else trans.crop_height
    box = (trans.crop_x, trans.crop_y, trans.crop_x + width, trans.crop_y + height)
    if box != (0, 0, img.width, img.height):
        img = img.crop(box)

    radius = max(trans.crop_corner_x_radius or 0, trans.crop_corner_y_radius or 0)
    if radius:
        mask = Image.new("L", img.size, 0)
        corners = (0, 0, img.width, img.height)
        ImageDraw.Draw(mask).rounded_rectangle(corners, radius=radius, fill=255)
        img.putalpha(ImageChops.multiply(img.getchannel("A"), mask))
    return img


def _rotate(img: Image.Image, angle: float) -> Image.Image:
    # positive angles turn clockwise on the card
    return img.rotate(-math.degrees(angle), expand=True, resample=Image.Resampling.BICUBIC)


def _load_font(font: str, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    try:
        return ImageFont.truetype(font, size)
    except OSError:
        logger.debug("Font %s not found, using Pillow's default font", font)
        return ImageFont.load_default(size=size)


def _isolate_element(data: str, element_id: str) -> str:
    """Keep only the element with the given id (plus defs) in an SVG document."""
    root = ET.fromstring(data)
    target = next((el for el in root.iter() if el.get("id") == element_id), None)
    if target is None:
        raise ValueError(f"SVG has no element with id '{element_id}'")

    for child in list(root):
        if child is not target and not child.tag.endswith("defs"):
            root.remove(child)
    if target not in list(root):
        root.append(target)
    return ET.tostring(root, encoding="unicode")
