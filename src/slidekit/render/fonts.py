"""Font descriptions and resolution to Pillow fonts.

Fonts are looked up by family in the configured font directories and the
usual system locations. When no file matches, Pillow's scalable default font
is used so rendering never fails for lack of a font.
"""

import logging
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import ImageFont

from ..core.config import RenderConfig
from ..core.slides import TextElement

logger = logging.getLogger("SlideKit.render.fonts")


@dataclass(frozen=True)
class FontSpec:
    """Everything that affects how a line of text is measured and drawn."""
    family: str
    size: float
    bold: bool = False
    italic: bool = False

    @classmethod
    def for_element(cls, element: TextElement, size: Optional[float] = None) -> "FontSpec":
        return cls(
            family=element.font_family,
            size=element.font_size if size is None else size,
            bold=element.bold,
            italic=element.italic,
        )

    def css(self) -> str:
        """CSS font shorthand, e.g. ``italic bold 24px Arial``."""
        parts = []
        if self.italic:
            parts.append("italic")
        if self.bold:
            parts.append("bold")
        parts.append(f"{self.size:g}px")
        parts.append(self.family)
        return " ".join(parts)


# family -> candidate files as (regular, bold, italic, bold italic)
FONT_FILES: Dict[str, list[Tuple[str, str, str, str]]] = {
    "Arial": [
        ("arial.ttf", "arialbd.ttf", "ariali.ttf", "arialbi.ttf"),
        ("LiberationSans-Regular.ttf", "LiberationSans-Bold.ttf",
         "LiberationSans-Italic.ttf", "LiberationSans-BoldItalic.ttf"),
    ],
    "Helvetica": [
        ("LiberationSans-Regular.ttf", "LiberationSans-Bold.ttf",
         "LiberationSans-Italic.ttf", "LiberationSans-BoldItalic.ttf"),
    ],
    "Times New Roman": [
        ("times.ttf", "timesbd.ttf", "timesi.ttf", "timesbi.ttf"),
        ("LiberationSerif-Regular.ttf", "LiberationSerif-Bold.ttf",
         "LiberationSerif-Italic.ttf", "LiberationSerif-BoldItalic.ttf"),
    ],
    "Courier New": [
        ("cour.ttf", "courbd.ttf", "couri.ttf", "courbi.ttf"),
        ("LiberationMono-Regular.ttf", "LiberationMono-Bold.ttf",
         "LiberationMono-Italic.ttf", "LiberationMono-BoldItalic.ttf"),
    ],
    "Georgia": [
        ("georgia.ttf", "georgiab.ttf", "georgiai.ttf", "georgiaz.ttf"),
    ],
    "Verdana": [
        ("verdana.ttf", "verdanab.ttf", "verdanai.ttf", "verdanaz.ttf"),
    ],
    "DejaVu Sans": [
        ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf",
         "DejaVuSans-Oblique.ttf", "DejaVuSans-BoldOblique.ttf"),
    ],
}


def _system_font_dirs() -> list[Path]:
    if platform.system() == "Windows":
        return [Path(os.environ.get("WINDIR", "C:/Windows")) / "Fonts"]
    if platform.system() == "Darwin":
        return [
            Path("/Library/Fonts"),
            Path("/System/Library/Fonts/Supplemental"),
            Path.home() / "Library" / "Fonts",
        ]
    return [
        Path("/usr/share/fonts/truetype/msttcorefonts"),
        Path("/usr/share/fonts/truetype/liberation"),
        Path("/usr/share/fonts/truetype/liberation2"),
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts/TTF"),
        Path.home() / ".fonts",
    ]


class FontResolver:
    """Resolves a FontSpec to a Pillow font, with caching."""

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self._search_dirs = list(self.config.font_dirs) + _system_font_dirs()
        self._cache: dict[FontSpec, ImageFont.FreeTypeFont] = {}
        self._warned: set[str] = set()

    def font(self, spec: FontSpec) -> ImageFont.FreeTypeFont:
        cached = self._cache.get(spec)
        if cached is not None:
            return cached

        path = self.find_font_file(spec.family, spec.bold, spec.italic)
        if path is None and spec.family != self.config.default_font:
            path = self.find_font_file(self.config.default_font, spec.bold, spec.italic)

        font = None
        if path is not None:
            try:
                font = ImageFont.truetype(str(path), spec.size)
            except OSError as e:
                logger.warning(f"Could not load font file {path}: {e}")
        if font is None:
            if spec.family not in self._warned:
                logger.warning(f"No font file for '{spec.family}', using Pillow default font")
                self._warned.add(spec.family)
            font = ImageFont.load_default(size=spec.size)

        self._cache[spec] = font
        return font

    def find_font_file(self, family: str, bold: bool, italic: bool) -> Optional[Path]:
        variant = (2 if italic else 0) + (1 if bold else 0)
        for candidates in FONT_FILES.get(family, []):
            for name in (candidates[variant], candidates[0]):
                for directory in self._search_dirs:
                    path = directory / name
                    if path.exists():
                        return path
        return None

    def clear(self):
        self._cache.clear()
