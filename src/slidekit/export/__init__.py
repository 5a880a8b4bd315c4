"""Export targets — PNG (current slide) and PDF (whole deck)."""

from .png import PngExport, PngExporter, png_filename, scale_font_sizes
from .pdf import PagePlacement, PdfDocument, PdfExport, PdfExporter, fit_to_page
from .coordinator import ExportCoordinator

__all__ = [
    "PngExport",
    "PngExporter",
    "png_filename",
    "scale_font_sizes",
    "PagePlacement",
    "PdfDocument",
    "PdfExport",
    "PdfExporter",
    "fit_to_page",
    "ExportCoordinator",
]
