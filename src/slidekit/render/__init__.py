"""Rendering — fonts, text metrics, image loading and the surface rasterizer."""

from .fonts import FontResolver, FontSpec
from .metrics import LineLayout, PillowTextMetrics, TextMetrics, layout_lines
from .images import ImageLoader, decode_data_uri
from .rasterizer import PlacedLine, SurfaceRasterizer, anchor_shift
from .overlay import OverlayBox, overlay_boxes, overlay_style

__all__ = [
    "FontResolver",
    "FontSpec",
    "LineLayout",
    "PillowTextMetrics",
    "TextMetrics",
    "layout_lines",
    "ImageLoader",
    "decode_data_uri",
    "PlacedLine",
    "SurfaceRasterizer",
    "anchor_shift",
    "OverlayBox",
    "overlay_boxes",
    "overlay_style",
]
