"""Single-slide PNG export at the background image's native resolution."""

import io
import logging
import math
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from ..core.slides import Slide
from ..render.rasterizer import SurfaceRasterizer

logger = logging.getLogger("SlideKit.export.png")


@dataclass
class PngExport:
    filename: str
    data: bytes
    width: int
    height: int
    scale_factor: float


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def png_filename(slide_index: int) -> str:
    return f"slide-{slide_index + 1}.png"


def display_scale(native_width: int, display_width: Optional[float]) -> float:
    """Native-to-display ratio; 1.0 when the display width is unknown."""
    if not display_width:
        return 1.0
    return native_width / display_width


def scale_font_sizes(slide: Slide, scale: float) -> Slide:
    """Copy of ``slide`` with every font size scaled to whole pixels (min 1)."""
    scaled = slide.model_copy(deep=True)
    for element in scaled.text_elements:
        element.font_size = max(1, round_half_up(element.font_size * scale))
    return scaled


class PngExporter:
    """Renders one slide at native size with display-relative font scaling.

    Font sizes are authored against the on-screen image, so they are scaled
    by native width / display width before rasterizing.
    """

    def __init__(self, rasterizer: Optional[SurfaceRasterizer] = None):
        self.rasterizer = rasterizer or SurfaceRasterizer()

    def render(self, slide: Slide, background: Image.Image,
               display_width: Optional[float] = None) -> tuple[Image.Image, float]:
        width, height = background.size
        scale = display_scale(width, display_width)
        surface = self.rasterizer.rasterize(
            scale_font_sizes(slide, scale), background, width, height
        )
        return surface, scale

    def export(self, slide: Slide, background: Image.Image, slide_index: int,
               display_width: Optional[float] = None) -> PngExport:
        surface, scale = self.render(slide, background, display_width)
        buffer = io.BytesIO()
        surface.save(buffer, format="PNG")
        result = PngExport(
            filename=png_filename(slide_index),
            data=buffer.getvalue(),
            width=surface.width,
            height=surface.height,
            scale_factor=scale,
        )
        logger.info(f"Exported {result.filename}: {result.width}x{result.height}, "
                    f"font scale {scale:.3f}, {len(result.data)} bytes")
        return result
