"""Shared fixtures: deterministic text metrics and in-memory images."""

import base64
import io

import pytest
from PIL import Image

from slidekit.render.fonts import FontResolver, FontSpec
from slidekit.render.metrics import TextMetrics
from slidekit.render.rasterizer import SurfaceRasterizer


class FixedWidthMetrics(TextMetrics):
    """Every character is half the font size wide."""

    def line_width(self, font: FontSpec, text: str) -> float:
        return len(text) * font.size * 0.5


def png_bytes(width: int, height: int, color=(255, 255, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def data_uri(width: int, height: int, color=(255, 255, 255)) -> str:
    encoded = base64.b64encode(png_bytes(width, height, color)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


@pytest.fixture
def metrics():
    return FixedWidthMetrics()


@pytest.fixture
def rasterizer(metrics):
    return SurfaceRasterizer(metrics=metrics, resolver=FontResolver())
