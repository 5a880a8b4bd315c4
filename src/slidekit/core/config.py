"""Render/export configuration, read from the environment."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Fixed layout numbers shared by every rendering target
LINE_HEIGHT_FACTOR = 1.2
CORNER_PADDING = 2.0
SNAP_THRESHOLD = 5.0
NUDGE_STEP = 1.0
NUDGE_STEP_LARGE = 10.0

PAGE_SIZES = ("A4", "LETTER")


class RenderConfig(BaseModel):
    """Settings for fonts, image fetching and PDF output."""
    font_dirs: list[Path] = Field(default_factory=list)
    default_font: str = "Arial"
    image_timeout: float = 30.0
    jpeg_quality: int = Field(default=95, ge=1, le=100)
    page_size: str = "A4"

    @field_validator("page_size")
    @classmethod
    def _known_page_size(cls, value: str) -> str:
        value = value.upper()
        if value not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {PAGE_SIZES}, got {value!r}")
        return value

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "RenderConfig":
        env = os.environ if environ is None else environ
        values: dict = {}
        font_dirs = env.get("SLIDEKIT_FONT_DIRS")
        if font_dirs:
            values["font_dirs"] = [Path(p) for p in font_dirs.split(os.pathsep) if p]
        if env.get("SLIDEKIT_DEFAULT_FONT"):
            values["default_font"] = env["SLIDEKIT_DEFAULT_FONT"]
        if env.get("SLIDEKIT_IMAGE_TIMEOUT"):
            values["image_timeout"] = float(env["SLIDEKIT_IMAGE_TIMEOUT"])
        if env.get("SLIDEKIT_JPEG_QUALITY"):
            values["jpeg_quality"] = int(env["SLIDEKIT_JPEG_QUALITY"])
        if env.get("SLIDEKIT_PAGE_SIZE"):
            values["page_size"] = env["SLIDEKIT_PAGE_SIZE"]
        return cls(**values)
