"""Text overlay model — one styled text box on a slide.

Positions are percentages of the rendered slide size, so the same element
lands in the same place on screen, in a PNG at native resolution and on a
PDF page.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Align = Literal["left", "center", "right"]
StyleToggle = Literal["bold", "italic"]


class TextElement(BaseModel):
    """A styled, positioned block of (possibly multi-line) text.

    x is the horizontal anchor used together with ``align``; y is the top of
    the first line. Both are clamped to [0, 100] on every assignment.
    ``font_size`` is in display pixels, the size the slide is shown at while
    editing.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: Optional[str] = None
    text: str = "New Text"
    x: float = 50.0
    y: float = 50.0
    font_size: float = Field(default=24, gt=0)
    font_family: str = "Arial"
    color: str = "#000000"
    bold: bool = False
    italic: bool = False
    z_index: int = 1
    # Carried for persistence only; nothing here animates.
    start_animation: str = "none"
    end_animation: str = "none"
    align: Align = "left"

    @field_validator("x", "y")
    @classmethod
    def _clamp_percent(cls, value: float) -> float:
        return min(100.0, max(0.0, value))

    @field_validator("z_index")
    @classmethod
    def _clamp_z_index(cls, value: int) -> int:
        return max(1, value)

    @field_validator("start_animation", "end_animation", mode="before")
    @classmethod
    def _default_animation(cls, value):
        return value or "none"

    @field_validator("align", mode="before")
    @classmethod
    def _default_align(cls, value):
        return value or "left"

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, data: dict) -> "TextElement":
        return cls.model_validate(data)
