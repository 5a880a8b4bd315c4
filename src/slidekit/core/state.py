"""Editor state: the slide deck, the current slide and the selection.

Every editing command takes the state explicitly. Commands that need a
selected text element are no-ops (returning None) when nothing is selected.
"""

import json
import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import (
    CORNER_PADDING,
    NUDGE_STEP,
    NUDGE_STEP_LARGE,
    SNAP_THRESHOLD,
)
from .errors import PreconditionFailed
from .slides import Align, Slide, StyleToggle, TextElement

logger = logging.getLogger("SlideKit.core.state")

Corner = Literal["tl", "tr", "bl", "br"]


def snap_percent(value: float, threshold: float = SNAP_THRESHOLD) -> float:
    """Clamp to [0, 100] and snap to an edge when within ``threshold``."""
    value = max(0.0, min(100.0, value))
    if value < threshold:
        return 0.0
    if value > 100.0 - threshold:
        return 100.0
    return value


class EditorState(BaseModel):
    """The whole editable deck plus UI selection."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    slides: list[Slide] = Field(default_factory=list)
    current_slide_index: int = 0
    next_slide_id: int = 1
    selected_text_id: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def create(cls, image_srcs: list[str]) -> "EditorState":
        slides = [Slide(id=i + 1, image_src=src) for i, src in enumerate(image_srcs)]
        return cls(slides=slides, next_slide_id=len(slides) + 1)

    # ── Slides ──────────────────────────────────────────────────────────

    def current_slide(self) -> Optional[Slide]:
        if 0 <= self.current_slide_index < len(self.slides):
            return self.slides[self.current_slide_index]
        return None

    def switch_to_slide(self, index: int) -> bool:
        if not 0 <= index < len(self.slides):
            return False
        self.current_slide_index = index
        self.selected_text_id = None
        return True

    def add_slide(self, image_src: str) -> Slide:
        slide = Slide(id=self.next_slide_id, image_src=image_src)
        self.next_slide_id += 1
        self.slides.append(slide)
        self.current_slide_index = len(self.slides) - 1
        self.selected_text_id = None
        logger.info(f"Added slide {slide.id} ({len(self.slides)} total)")
        return slide

    def delete_slide(self, index: int) -> Slide:
        if len(self.slides) <= 1:
            raise PreconditionFailed("Cannot delete the last slide")
        if not 0 <= index < len(self.slides):
            raise IndexError(f"No slide at position {index + 1}")
        removed = self.slides.pop(index)
        if self.current_slide_index >= len(self.slides):
            self.current_slide_index = len(self.slides) - 1
        self.selected_text_id = None
        logger.info(f"Deleted slide {removed.id}")
        return removed

    # ── Selection ───────────────────────────────────────────────────────

    def select_text(self, text_id: Optional[str]) -> Optional[TextElement]:
        slide = self.current_slide()
        element = slide.get_text_element(text_id) if slide and text_id else None
        self.selected_text_id = element.id if element else None
        return element

    def selected_text(self) -> Optional[TextElement]:
        slide = self.current_slide()
        if not slide or not self.selected_text_id:
            return None
        return slide.get_text_element(self.selected_text_id)

    def add_text(self) -> Optional[TextElement]:
        slide = self.current_slide()
        if slide is None:
            return None
        element = slide.add_text_element(TextElement(text="New Text", x=50, y=50))
        self.selected_text_id = element.id
        return element

    def delete_selected_text(self) -> Optional[TextElement]:
        element = self.selected_text()
        if element is None:
            return None
        self.current_slide().remove_text_element(element.id)
        self.selected_text_id = None
        return element

    # ── Per-field updates ───────────────────────────────────────────────

    def set_text(self, text: str) -> Optional[TextElement]:
        return self.update_selected(text=text)

    def set_font_family(self, font_family: str) -> Optional[TextElement]:
        return self.update_selected(font_family=font_family)

    def set_font_size(self, font_size: float) -> Optional[TextElement]:
        return self.update_selected(font_size=font_size)

    def set_color(self, color: str) -> Optional[TextElement]:
        return self.update_selected(color=color)

    def set_align(self, align: Align) -> Optional[TextElement]:
        return self.update_selected(align=align)

    def set_start_animation(self, animation: str) -> Optional[TextElement]:
        return self.update_selected(start_animation=animation)

    def set_end_animation(self, animation: str) -> Optional[TextElement]:
        return self.update_selected(end_animation=animation)

    def set_position(self, x: float, y: float) -> Optional[TextElement]:
        return self.update_selected(x=x, y=y)

    def toggle_style(self, style: StyleToggle) -> Optional[TextElement]:
        element = self.selected_text()
        if element is None:
            return None
        if style == "bold":
            element.bold = not element.bold
        elif style == "italic":
            element.italic = not element.italic
        else:
            raise ValueError(f"Unknown style toggle: {style!r}")
        return element

    def update_selected(self, **values) -> Optional[TextElement]:
        """Apply several field changes to the selection, all or nothing.

        Every value is validated against the element before any field is
        touched, so a rejected value leaves the element unchanged.
        """
        element = self.selected_text()
        if element is None:
            return None
        unknown = set(values) - set(TextElement.model_fields)
        if unknown:
            raise ValueError(f"Unknown text element field(s): {sorted(unknown)}")
        checked = TextElement.model_validate({**element.model_dump(), **values})
        for name in values:
            setattr(element, name, getattr(checked, name))
        return element

    # ── Placement ───────────────────────────────────────────────────────

    def place_at_corner(self, corner: Corner,
                        padding: float = CORNER_PADDING) -> Optional[TextElement]:
        corners = {
            "tl": (padding, padding),
            "tr": (100 - padding, padding),
            "bl": (padding, 100 - padding),
            "br": (100 - padding, 100 - padding),
        }
        if corner not in corners:
            raise ValueError(f"Unknown corner: {corner!r}")
        x, y = corners[corner]
        return self.update_selected(x=x, y=y)

    def adjust_z_order(self, direction: int) -> Optional[TextElement]:
        element = self.selected_text()
        if element is None:
            return None
        element.z_index = element.z_index + direction
        return element

    def nudge_selected(self, dx: int, dy: int, large: bool = False) -> Optional[TextElement]:
        """Move by whole steps (arrow keys); ``large`` is the shift-modified step."""
        element = self.selected_text()
        if element is None:
            return None
        step = NUDGE_STEP_LARGE if large else NUDGE_STEP
        element.x = element.x + dx * step
        element.y = element.y + dy * step
        return element

    def drag_selected(self, start_x: float, start_y: float,
                      delta_px_x: float, delta_px_y: float,
                      surface_width: float, surface_height: float) -> Optional[TextElement]:
        """Position the selection from a pointer drag measured in surface pixels.

        ``start_x``/``start_y`` are the element's percentages when the drag
        began. The result snaps to the slide edges.
        """
        element = self.selected_text()
        if element is None:
            return None
        x = start_x + delta_px_x / surface_width * 100
        y = start_y + delta_px_y / surface_height * 100
        element.x = snap_percent(x)
        element.y = snap_percent(y)
        return element

    # ── Persistence ─────────────────────────────────────────────────────

    def to_record(self) -> dict:
        return {
            "slides": [slide.to_record() for slide in self.slides],
            "currentSlideIndex": self.current_slide_index,
            "nextSlideId": self.next_slide_id,
        }

    def load_record(self, data: dict) -> bool:
        """Replace the deck from a saved record. Records without slides are ignored."""
        slides_data = data.get("slides") or []
        if not slides_data:
            return False
        slides = [Slide.from_record(s) for s in slides_data]
        self.slides = slides
        self.current_slide_index = max(0, min(data.get("currentSlideIndex") or 0, len(slides) - 1))
        self.next_slide_id = data.get("nextSlideId") or max(s.id for s in slides) + 1
        self.selected_text_id = None
        return True

    @classmethod
    def from_record(cls, data: dict) -> "EditorState":
        state = cls()
        state.load_record(data)
        return state

    def save(self, path: Path):
        path.write_text(json.dumps(self.to_record(), indent=2))
        logger.info(f"Saved {len(self.slides)} slide(s) to {path}")

    def load(self, path: Path) -> bool:
        if not path.exists():
            return False
        return self.load_record(json.loads(path.read_text()))
