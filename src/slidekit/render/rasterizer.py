"""Surface rasterizer — paints one slide onto a pixel surface.

This is the single drawing routine behind every export target. Percent
positions are resolved against the surface size, so callers choose the
resolution simply by choosing ``width``/``height``.

Alignment uses the widest line of a block: a centered or right-aligned
multi-line element shifts every line by the same amount, giving one
ragged block rather than lines centered individually.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageColor, ImageDraw

from ..core.slides import Align, Slide
from .fonts import FontResolver, FontSpec
from .metrics import PillowTextMetrics, TextMetrics, layout_lines

logger = logging.getLogger("SlideKit.render.rasterizer")

_FALLBACK_FILL = (0, 0, 0, 255)


@dataclass
class PlacedLine:
    """One line of text at its final surface position (top-left origin)."""
    element_id: Optional[str]
    text: str
    x: float
    y: float
    font: FontSpec
    color: str


def anchor_shift(align: Align, max_width: float) -> float:
    """Leftward shift applied to the anchor for a block ``max_width`` wide."""
    if align == "center":
        return max_width / 2
    if align == "right":
        return max_width
    return 0.0


class SurfaceRasterizer:
    """Lays out and draws slides using one metrics provider and font resolver."""

    def __init__(self, metrics: Optional[TextMetrics] = None,
                 resolver: Optional[FontResolver] = None):
        self.resolver = resolver or FontResolver()
        self.metrics = metrics or PillowTextMetrics(self.resolver)

    def plan(self, slide: Slide, width: int, height: int) -> list[PlacedLine]:
        """Every line to draw, in paint order (lowest z-index first)."""
        placed: list[PlacedLine] = []
        for element in slide.paint_order():
            font = FontSpec.for_element(element)
            layout = layout_lines(font, element.text, self.metrics)
            anchor_x = element.x / 100 * width
            anchor_y = element.y / 100 * height
            x = anchor_x - anchor_shift(element.align, layout.max_width)
            for i, line in enumerate(layout.lines):
                placed.append(PlacedLine(
                    element_id=element.id,
                    text=line,
                    x=x,
                    y=anchor_y + i * layout.line_height,
                    font=font,
                    color=element.color,
                ))
        return placed

    def rasterize(self, slide: Slide, background: Image.Image,
                  width: int, height: int) -> Image.Image:
        """Draw ``background`` stretched to ``width`` x ``height``, then the text.

        The background must already be decoded; this does no I/O.
        """
        surface = Image.new("RGBA", (width, height), (255, 255, 255, 0))
        bg = background.convert("RGBA")
        if bg.size != (width, height):
            bg = bg.resize((width, height), Image.Resampling.LANCZOS)
        surface.alpha_composite(bg)

        lines = self.plan(slide, width, height)
        draw = ImageDraw.Draw(surface)
        for line in lines:
            if not line.text:
                continue
            draw.text(
                (line.x, line.y),
                line.text,
                font=self.resolver.font(line.font),
                fill=self._fill(line.color),
                anchor="la",  # top of the glyph box, not the baseline
            )
        logger.debug(f"Rasterized slide {slide.id} at {width}x{height}: "
                     f"{len(slide.text_elements)} element(s), {len(lines)} line(s)")
        return surface

    @staticmethod
    def _fill(color: str):
        try:
            return ImageColor.getcolor(color, "RGBA")
        except ValueError:
            logger.warning(f"Unrecognized color {color!r}, drawing in black")
            return _FALLBACK_FILL
