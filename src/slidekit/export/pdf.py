"""Multi-slide PDF export: one page per slide, image fitted and centered."""

import io
import logging
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from ..core.config import RenderConfig
from ..core.errors import PreconditionFailed
from ..core.slides import Slide
from ..render.rasterizer import SurfaceRasterizer
from .png import round_half_up

logger = logging.getLogger("SlideKit.export.pdf")

DEFAULT_PDF_FILENAME = "slides.pdf"


def _require_reportlab():
    try:
        from reportlab.lib import pagesizes
        from reportlab.lib.utils import ImageReader
        from reportlab.pdfgen import canvas
    except ImportError as e:
        raise PreconditionFailed(
            "PDF export needs reportlab. Install with: pip install reportlab"
        ) from e
    return pagesizes, canvas, ImageReader


@dataclass
class PagePlacement:
    """Where a slide image sits on its page, in page units.

    ``x``/``y`` is the lower-left corner, the origin reportlab draws from.
    """
    x: float
    y: float
    width: float
    height: float


@dataclass
class PdfExport:
    filename: str
    data: bytes
    page_size: tuple[float, float]
    pages: list[PagePlacement] = field(default_factory=list)


def fit_to_page(image_width: float, image_height: float,
                page_width: float, page_height: float) -> PagePlacement:
    """Fit inside the page keeping aspect ratio, never cropping, centered.

    Width-fit first (letterbox); height-fit when that would overflow
    (pillarbox). The left and top margins are rounded to whole units; ``y``
    is then measured up from the bottom edge.
    """
    ratio = image_width / image_height
    draw_w = page_width
    draw_h = page_width / ratio
    if draw_h > page_height:
        draw_h = page_height
        draw_w = page_height * ratio
    top = round_half_up((page_height - draw_h) / 2)
    return PagePlacement(
        x=round_half_up((page_width - draw_w) / 2),
        y=page_height - draw_h - top,
        width=draw_w,
        height=draw_h,
    )


class PdfDocument:
    """A reportlab document that slide images are appended to, page by page."""

    def __init__(self, config: Optional[RenderConfig] = None, title: Optional[str] = None):
        self.config = config or RenderConfig()
        pagesizes, canvas, self._image_reader = _require_reportlab()
        self.page_size = getattr(pagesizes, self.config.page_size)
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=self.page_size)
        self._canvas.setTitle(title or "Slides")
        self.pages: list[PagePlacement] = []

    def add_image_page(self, image_data: bytes, image_width: int, image_height: int) -> PagePlacement:
        # The first slide uses the document's initial page
        if self.pages:
            self._canvas.showPage()
        page_w, page_h = self.page_size
        placement = fit_to_page(image_width, image_height, page_w, page_h)
        self._canvas.drawImage(
            self._image_reader(io.BytesIO(image_data)),
            placement.x,
            placement.y,
            width=placement.width,
            height=placement.height,
            preserveAspectRatio=False,
        )
        self.pages.append(placement)
        return placement

    def finish(self) -> bytes:
        self._canvas.save()
        return self._buffer.getvalue()


class PdfExporter:
    """Renders slides at native resolution with authored font sizes.

    Unlike PNG export no display-relative font scaling is applied.
    """

    def __init__(self, rasterizer: Optional[SurfaceRasterizer] = None,
                 config: Optional[RenderConfig] = None):
        self.rasterizer = rasterizer or SurfaceRasterizer()
        self.config = config or RenderConfig()

    def new_document(self, title: Optional[str] = None) -> PdfDocument:
        return PdfDocument(self.config, title=title)

    def render_page_image(self, slide: Slide, background: Image.Image) -> tuple[bytes, int, int]:
        width, height = background.size
        surface = self.rasterizer.rasterize(slide, background, width, height)
        buffer = io.BytesIO()
        surface.convert("RGB").save(buffer, format="JPEG", quality=self.config.jpeg_quality)
        return buffer.getvalue(), width, height

    def add_slide(self, document: PdfDocument, slide: Slide, background: Image.Image) -> PagePlacement:
        data, width, height = self.render_page_image(slide, background)
        placement = document.add_image_page(data, width, height)
        logger.debug(f"Slide {slide.id}: {width}x{height} placed at "
                     f"({placement.x}, {placement.y}) size {placement.width:.1f}x{placement.height:.1f}")
        return placement
