"""Project workspace: background images, editor record and exports on disk."""

import json
import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

logger = logging.getLogger("SlideKit.core.workspace")


class ImageAsset(BaseModel):
    """A background image registered in the project."""
    asset_id: str
    filename: str
    source: str = ""  # original path or URL
    dimensions: Optional[tuple[int, int]] = None  # native width, height


class Workspace(BaseModel):
    """Manages a slide project directory and its image manifest."""
    project_name: str
    root_path: Path
    images: dict[str, ImageAsset] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def images_dir(self) -> Path:
        return self.root_path / "assets" / "images"

    @property
    def exports_dir(self) -> Path:
        return self.root_path / "exports"

    @property
    def manifest_path(self) -> Path:
        return self.root_path / "project.json"

    @property
    def slides_path(self) -> Path:
        return self.root_path / "slides.json"

    def initialize(self) -> "Workspace":
        """Create the project directory structure."""
        for d in [self.images_dir, self.exports_dir]:
            d.mkdir(parents=True, exist_ok=True)
        self.save_manifest()
        return self

    def save_manifest(self):
        data = {
            "project_name": self.project_name,
            "images": {k: v.model_dump() for k, v in self.images.items()},
        }
        self.manifest_path.write_text(json.dumps(data, indent=2, default=str))

    @classmethod
    def load(cls, project_path: Path) -> "Workspace":
        """Load a workspace from an existing project directory."""
        manifest_path = project_path / "project.json"
        if not manifest_path.exists():
            raise FileNotFoundError(f"No project.json found in {project_path}")

        data = json.loads(manifest_path.read_text())
        images = {
            k: ImageAsset(**v) for k, v in data.get("images", {}).items()
        }
        return cls(
            project_name=data["project_name"],
            root_path=project_path,
            images=images,
        )

    def register_image(self, asset: ImageAsset) -> ImageAsset:
        self.images[asset.asset_id] = asset
        self.save_manifest()
        return asset

    def import_image(self, file_path: Path) -> ImageAsset:
        """Copy an image into the project and record its native size.

        Raises ValueError when the file is not a decodable image.
        """
        try:
            with Image.open(file_path) as img:
                dimensions = img.size
        except (OSError, UnidentifiedImageError) as e:
            raise ValueError(f"Not an image: {file_path} ({e})") from e

        self.images_dir.mkdir(parents=True, exist_ok=True)
        asset_id = f"img_{uuid.uuid4().hex[:8]}"
        filename = f"{asset_id}{file_path.suffix.lower()}"
        shutil.copy2(file_path, self.images_dir / filename)
        logger.info(f"Imported {file_path} as {filename} ({dimensions[0]}x{dimensions[1]})")
        return self.register_image(ImageAsset(
            asset_id=asset_id,
            filename=filename,
            source=str(file_path),
            dimensions=dimensions,
        ))

    def get_image_path(self, asset_id: str) -> Optional[Path]:
        asset = self.images.get(asset_id)
        if not asset:
            return None
        return self.images_dir / asset.filename
