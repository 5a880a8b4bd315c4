"""Slide data model: a background image plus its text overlays."""

import logging
import re
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .text import TextElement

logger = logging.getLogger("SlideKit.core.slides")

TEXT_ID_PREFIX = "text"
_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def id_number(text_id: str) -> Optional[int]:
    """Numeric part of an id like ``text-7``; None when there is none."""
    parts = text_id.split("-")
    if len(parts) < 2:
        return None
    match = _LEADING_DIGITS.match(parts[1])
    return int(match.group(1)) if match else None


def next_id(existing_ids: Iterable[str], counter: int = 1) -> int:
    """Return the next free ``text-N`` number.

    The result is never below ``counter`` and always exceeds every numeric
    suffix in ``existing_ids``, so ids imported from a saved record never
    collide with ids minted afterwards.
    """
    for text_id in existing_ids:
        number = id_number(text_id)
        if number is not None and number >= counter:
            counter = number + 1
    return counter


class Slide(BaseModel):
    """One slide: a background image reference and its text elements.

    ``text_elements`` keeps insertion order, which breaks z-index ties when
    painting.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: int
    image_src: str
    text_elements: list[TextElement] = Field(default_factory=list)
    next_text_id: int = 1

    @field_validator("next_text_id", mode="before")
    @classmethod
    def _default_counter(cls, value):
        return value or 1

    def get_text_element(self, text_id: str) -> Optional[TextElement]:
        for element in self.text_elements:
            if element.id == text_id:
                return element
        return None

    def add_text_element(self, element: TextElement) -> TextElement:
        if not element.id:
            element.id = f"{TEXT_ID_PREFIX}-{self.next_text_id}"
            self.next_text_id += 1
        else:
            if self.get_text_element(element.id) is not None:
                raise ValueError(f"Slide {self.id} already has a text element '{element.id}'")
            self.next_text_id = next_id([element.id], self.next_text_id)
        self.text_elements.append(element)
        logger.debug(f"Slide {self.id}: added text element {element.id}")
        return element

    def remove_text_element(self, text_id: str) -> bool:
        original_len = len(self.text_elements)
        self.text_elements = [el for el in self.text_elements if el.id != text_id]
        return len(self.text_elements) < original_len

    def paint_order(self) -> list[TextElement]:
        """Elements sorted by z-index, lowest first; ties keep insertion order."""
        return sorted(self.text_elements, key=lambda el: el.z_index)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, data: dict) -> "Slide":
        elements = [TextElement.from_record(el) for el in data.get("textElements", [])]
        counter = next_id(
            [el.id for el in elements if el.id],
            data.get("nextTextId") or 1,
        )
        return cls(
            id=data["id"],
            image_src=data["imageSrc"],
            text_elements=elements,
            next_text_id=counter,
        )
