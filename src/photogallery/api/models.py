"""Pydantic response models for the photo gallery API.

These models define the JSON schema of every endpoint.  FastAPI uses them
for serialisation and OpenAPI documentation generation.

Models
------
ImageItem / ImagesResponse
    ``GET /api/images``: a page of images with the total match count.
ImageJsonItem / ImagesJsonResponse
    ``GET /api/images.json``: a page of images with a ``hasMore`` flag;
    the title is sent as ``alt``.
CollectionItem / CollectionsResponse
    ``GET /api/collections``: collections declared in the manifest.
ErrorResponse
    Generic ``500`` body.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from photogallery.core.image_store import ResolvedImage
from photogallery.core.manifest import Collection


class ImageItem(BaseModel):
    """A resolved image flattened for JSON.

    Attributes:
        src: URL the image file is served from.
        width: Width in pixels.
        height: Height in pixels.
        title: Image title from the manifest.
        description: Image description from the manifest.
    """

    src: str
    width: int
    height: int
    title: str | None = None
    description: str | None = None

    @classmethod
    def from_resolved(cls, image: ResolvedImage) -> ImageItem:
        return cls(
            src=image.src.src,
            width=image.src.width,
            height=image.src.height,
            title=image.title,
            description=image.description,
        )


class ImagesResponse(BaseModel):
    """Response body of ``GET /api/images``."""

    images: list[ImageItem]
    total: int = Field(..., description="Number of images matching the filter.")


class ImageJsonItem(BaseModel):
    """Image entry of ``GET /api/images.json`` (title sent as ``alt``)."""

    src: str
    width: int
    height: int
    alt: str | None = None
    description: str | None = None

    @classmethod
    def from_resolved(cls, image: ResolvedImage) -> ImageJsonItem:
        return cls(
            src=image.src.src,
            width=image.src.width,
            height=image.src.height,
            alt=image.title,
            description=image.description,
        )


class ImagesJsonResponse(BaseModel):
    """Response body of ``GET /api/images.json``."""

    model_config = ConfigDict(populate_by_name=True)

    images: list[ImageJsonItem]
    has_more: bool = Field(
        ...,
        alias="hasMore",
        description="True when pages after this one still hold images.",
    )


class CollectionItem(BaseModel):
    id: str
    name: str | None = None

    @classmethod
    def from_collection(cls, collection: Collection) -> CollectionItem:
        return cls(id=collection.id, name=collection.name)


class CollectionsResponse(BaseModel):
    collections: list[CollectionItem]


class ErrorResponse(BaseModel):
    """Generic error body returned with HTTP 500."""

    error: str
