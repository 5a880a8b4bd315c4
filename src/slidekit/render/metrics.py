"""Text metrics and line layout.

Line widths come from a metrics provider so the layout math can be checked
without depending on which fonts happen to be installed.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.config import LINE_HEIGHT_FACTOR
from .fonts import FontResolver, FontSpec


class TextMetrics:
    """Measures the rendered width of one line of text."""

    def line_width(self, font: FontSpec, text: str) -> float:
        raise NotImplementedError


class PillowTextMetrics(TextMetrics):
    """Widths from the same Pillow fonts the rasterizer draws with."""

    def __init__(self, resolver: Optional[FontResolver] = None):
        self.resolver = resolver or FontResolver()

    def line_width(self, font: FontSpec, text: str) -> float:
        if not text:
            return 0.0
        return float(self.resolver.font(font).getlength(text))


@dataclass
class LineLayout:
    """Per-line widths and vertical metrics of a text block."""
    lines: list[str]
    widths: list[float]
    line_height: float

    @property
    def max_width(self) -> float:
        return max(self.widths, default=0.0)

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height


def layout_lines(font: FontSpec, text: str, metrics: TextMetrics) -> LineLayout:
    """Split on explicit newlines and measure each line.

    An empty string is still one (empty) line.
    """
    lines = text.split("\n")
    return LineLayout(
        lines=lines,
        widths=[metrics.line_width(font, line) for line in lines],
        line_height=font.size * LINE_HEIGHT_FACTOR,
    )
