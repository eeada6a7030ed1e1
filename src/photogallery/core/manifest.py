"""Gallery manifest models and YAML loader.

The manifest is a single YAML document with two top-level lists::

    collections:
      - id: travel
        name: Travel
    images:
      - path: images/lisbon.jpg
        meta:
          title: Lisbon
          description: Tram 28 at dusk.
          collections: [travel, featured]
        exif:
          captureDate: 2023-05-01T18:42:00

The structure is validated with Pydantic models that fail closed: any field
of the wrong shape aborts the load with a message naming the offending field
path.  Collection *references* are checked later by the image store, because
the set of valid ids includes built-in collections that the manifest does not
declare.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class GalleryLoadError(Exception):
    """Raised when a manifest file is missing, unreadable, or malformed."""


class Collection(BaseModel):
    """A named grouping of images declared once in the manifest."""

    id: str = Field(..., description="Identifier referenced by image entries.")
    name: str | None = Field(default=None, description="Human-readable name.")


class ImageMeta(BaseModel):
    """Descriptive metadata of a manifest image entry."""

    title: str | None = None
    description: str | None = None
    collections: list[str] = Field(default_factory=list)


class ImageExif(BaseModel):
    """EXIF-derived fields of a manifest image entry.

    YAML parses bare dates (``2023-05-01``) into :class:`datetime.date`
    objects and full timestamps into :class:`datetime.datetime`.  Both are
    accepted; plain dates become midnight so that every capture date sorts
    on the same scale.
    """

    model_config = ConfigDict(populate_by_name=True)

    capture_date: datetime | None = Field(default=None, alias="captureDate")

    @field_validator("capture_date", mode="before")
    @classmethod
    def _date_to_datetime(cls, value):
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value


class GalleryImage(BaseModel):
    """A single image entry of the manifest.

    Attributes:
        path: Image file path relative to the manifest's directory.
        meta: Title, description, and collection membership.
        exif: Optional EXIF data (currently only the capture date).
    """

    path: str
    meta: ImageMeta = Field(default_factory=ImageMeta)
    exif: ImageExif | None = None

    @property
    def capture_date(self) -> datetime | None:
        return self.exif.capture_date if self.exif else None


class GalleryData(BaseModel):
    """The full parsed manifest."""

    collections: list[Collection] = Field(default_factory=list)
    images: list[GalleryImage] = Field(default_factory=list)


def _format_validation_error(error: ValidationError) -> str:
    """Render a pydantic error as ``field.path: message`` pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def load_gallery(path: Path | str) -> GalleryData:
    """Read and validate a gallery manifest.

    Args:
        path: Path to the manifest YAML file.

    Returns:
        The parsed :class:`GalleryData`.  An empty document yields an empty
        gallery.

    Raises:
        GalleryLoadError: If the file is missing or unreadable, is not valid
            YAML, or does not match the manifest schema.
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise GalleryLoadError(f"Gallery file not found: {path}") from exc
    except OSError as exc:
        raise GalleryLoadError(f"Cannot read gallery file {path}: {exc}") from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GalleryLoadError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise GalleryLoadError(
            f"Invalid gallery file {path}: expected a mapping at the top level, "
            f"got {type(raw).__name__}"
        )

    try:
        gallery = GalleryData.model_validate(raw)
    except ValidationError as exc:
        raise GalleryLoadError(
            f"Invalid gallery file {path}: {_format_validation_error(exc)}"
        ) from exc

    logger.debug(
        f"Loaded gallery {path}: {len(gallery.collections)} collections, "
        f"{len(gallery.images)} images"
    )
    return gallery
