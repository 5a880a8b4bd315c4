"""Background image loading from data URIs, HTTP(S) URLs and local files."""

import asyncio
import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes

import requests
from PIL import Image, UnidentifiedImageError

from ..core.config import RenderConfig
from ..core.errors import ResourceUnavailable

logger = logging.getLogger("SlideKit.render.images")


def decode_data_uri(uri: str) -> bytes:
    """Payload bytes of a ``data:`` URI (base64 or percent-encoded)."""
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ValueError("data URI has no ',' separator")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=True)
    return unquote_to_bytes(payload)


class ImageLoader:
    """Resolves an ``image_src`` reference to a fully decoded Pillow image."""

    def __init__(self, base_dir: Optional[Path] = None,
                 config: Optional[RenderConfig] = None):
        self.base_dir = base_dir
        self.config = config or RenderConfig()

    def fetch(self, src: str) -> bytes:
        if not src:
            raise ResourceUnavailable(src, "empty image reference")
        try:
            if src.startswith("data:"):
                return decode_data_uri(src)
            if src.startswith(("http://", "https://")):
                response = requests.get(src, timeout=self.config.image_timeout)
                response.raise_for_status()
                return response.content
            return self._resolve_path(src).read_bytes()
        except (requests.RequestException, OSError, ValueError, binascii.Error) as e:
            logger.error(f"Failed to fetch image {src[:60]}: {e}")
            raise ResourceUnavailable(src, str(e)) from e

    def load(self, src: str) -> Image.Image:
        """Fetch and decode; raises ResourceUnavailable on any failure."""
        data = self.fetch(src)
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Failed to decode image {src[:60]}: {e}")
            raise ResourceUnavailable(src, f"cannot decode image: {e}") from e
        logger.debug(f"Loaded {img.format} image {img.size[0]}x{img.size[1]}")
        return img

    async def load_async(self, src: str) -> Image.Image:
        return await asyncio.to_thread(self.load, src)

    def _resolve_path(self, src: str) -> Path:
        path = Path(src[len("file://"):] if src.startswith("file://") else src)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path
