"""Slides package — public API re-exports."""

from .text import Align, StyleToggle, TextElement
from .slide import Slide, id_number, next_id

__all__ = [
    "Align",
    "StyleToggle",
    "TextElement",
    "Slide",
    "id_number",
    "next_id",
]
