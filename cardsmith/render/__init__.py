from cardsmith.render.blend import BLEND_OPS, blend
from cardsmith.render.images import image_size, raster_size, svg_size
from cardsmith.render.pillow_sink import PillowSink
from cardsmith.render.recording import RecordingSink, RenderCall
from cardsmith.render.sink import RenderSink

__all__ = [
    "BLEND_OPS",
    "PillowSink",
    "RecordingSink",
    "RenderCall",
    "RenderSink",
    "blend",
    "image_size",
    "raster_size",
    "svg_size",
]
