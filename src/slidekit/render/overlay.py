"""Live overlay styles for showing a slide's text over its image in a browser.

The overlay uses CSS percentages and translateX, so it scales with the
displayed image and needs no text metrics.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..core.slides import Slide, TextElement
from .fonts import FontSpec

TRANSLATE_X = {
    "left": "translateX(0)",
    "center": "translateX(-50%)",
    "right": "translateX(-100%)",
}


@dataclass
class OverlayBox:
    """A positioned text box for the live overlay."""
    element_id: Optional[str]
    text: str
    style: dict[str, str] = field(default_factory=dict)
    selected: bool = False


def overlay_style(element: TextElement) -> dict[str, str]:
    return {
        "left": f"{element.x:g}%",
        "top": f"{element.y:g}%",
        "font": FontSpec.for_element(element).css(),
        "color": element.color,
        "z-index": str(element.z_index),
        "text-align": element.align,
        "transform": TRANSLATE_X[element.align],
        "white-space": "pre",
    }


def overlay_boxes(slide: Slide, selected_id: Optional[str] = None) -> list[OverlayBox]:
    """Overlay boxes in paint order."""
    return [
        OverlayBox(
            element_id=element.id,
            text=element.text,
            style=overlay_style(element),
            selected=element.id is not None and element.id == selected_id,
        )
        for element in slide.paint_order()
    ]
