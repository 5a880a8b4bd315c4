"""Async export driver with a single-export-at-a-time guard.

Image decoding, rasterizing and encoding run in worker threads, one slide
at a time, so the event loop stays free during an export. Only one export
may run against the deck at a time; a second request fails fast with
ExportInProgress instead of queueing behind the first.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from ..core.config import RenderConfig
from ..core.errors import ExportInProgress, PreconditionFailed
from ..core.state import EditorState
from ..render.fonts import FontResolver
from ..render.images import ImageLoader
from ..render.rasterizer import SurfaceRasterizer
from .pdf import DEFAULT_PDF_FILENAME, PdfExport, PdfExporter
from .png import PngExport, PngExporter

logger = logging.getLogger("SlideKit.export.coordinator")


class ExportCoordinator:
    """Runs PNG and PDF exports sequentially over one shared rasterizer."""

    def __init__(self, loader: ImageLoader,
                 rasterizer: Optional[SurfaceRasterizer] = None,
                 config: Optional[RenderConfig] = None):
        self.loader = loader
        self.config = config or loader.config
        self.rasterizer = rasterizer or SurfaceRasterizer(resolver=FontResolver(self.config))
        self.png = PngExporter(self.rasterizer)
        self.pdf = PdfExporter(self.rasterizer, self.config)
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def _exclusive(self, kind: str) -> AsyncIterator[None]:
        if self._lock.locked():
            raise ExportInProgress(f"Cannot start {kind} export: another export is running")
        async with self._lock:
            yield

    async def export_png(self, state: EditorState,
                         display_width: Optional[float] = None,
                         save_to: Optional[Path] = None) -> PngExport:
        """Export the current slide at its background's native resolution."""
        async with self._exclusive("PNG"):
            slide = state.current_slide()
            if slide is None:
                raise PreconditionFailed("There is no slide to export")
            slide_index = state.current_slide_index
            slide = slide.model_copy(deep=True)
            background = await self.loader.load_async(slide.image_src)
            result = await asyncio.to_thread(
                self.png.export, slide, background, slide_index, display_width
            )
        if save_to is not None:
            _write(save_to / result.filename, result.data)
        return result

    async def export_pdf(self, state: EditorState,
                         filename: str = DEFAULT_PDF_FILENAME,
                         save_to: Optional[Path] = None) -> PdfExport:
        """Export every slide, in deck order, one page each.

        The deck is copied when the export starts. Any failure aborts the
        whole export and no document is returned.
        """
        async with self._exclusive("PDF"):
            if not state.slides:
                raise PreconditionFailed("There are no slides to export")
            slides = [slide.model_copy(deep=True) for slide in state.slides]
            document = await asyncio.to_thread(self.pdf.new_document)
            logger.info(f"Starting PDF export: {len(slides)} slide(s)")
            # Strictly one slide at a time: decode, rasterize, append
            for index, slide in enumerate(slides):
                logger.debug(f"PDF page {index + 1}/{len(slides)}: slide {slide.id}")
                background = await self.loader.load_async(slide.image_src)
                await asyncio.to_thread(self.pdf.add_slide, document, slide, background)
            data = await asyncio.to_thread(document.finish)
            result = PdfExport(
                filename=filename,
                data=data,
                page_size=document.page_size,
                pages=list(document.pages),
            )
            logger.info(f"Exported {filename}: {len(result.pages)} page(s), {len(data)} bytes")
        if save_to is not None:
            _write(save_to / result.filename, result.data)
        return result


def _write(path: Path, data: bytes):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(f"Wrote {path} ({len(data)} bytes)")
