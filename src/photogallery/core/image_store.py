"""Image store: filtering, sorting, pagination, and asset resolution.

The store composes the manifest loader and the asset catalog.  Every call
re-reads the manifest, so edits to ``gallery.yaml`` show up on the next
request without a restart, while the asset catalog is discovered once at
startup and injected through the constructor.

Processing order for :meth:`ImageStore.get_images`:

1. load the manifest and check every collection reference
2. filter by collection
3. sort by capture date and/or reverse for descending order
4. count the total
5. slice out the requested page
6. resolve the page's entries against the asset catalog

Only the entries on the requested page are resolved.  An entry whose file
was not discovered is logged and dropped; the rest of the page is still
returned.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from photogallery.core.assets import (
    AssetCatalog,
    AssetNotFoundError,
    ImageAsset,
    normalize_asset_key,
)
from photogallery.core.manifest import (
    Collection,
    GalleryData,
    GalleryImage,
    GalleryLoadError,
    load_gallery,
)

logger = logging.getLogger(__name__)

FEATURED_COLLECTION_ID = "featured"
BUILT_IN_COLLECTIONS: tuple[str, ...] = (FEATURED_COLLECTION_ID,)

DEFAULT_GALLERY_PATH = Path("src/gallery/gallery.yaml")


class ImageStoreError(Exception):
    """Raised when the store cannot load or validate the gallery."""


class GetImagesOptions(BaseModel):
    """Options for :meth:`ImageStore.get_images`.

    Attributes:
        gallery_path: Manifest to read.  ``None`` uses the store's default.
        collection: Only return images belonging to this collection.
        sort_by: Property to sort by; only ``"captureDate"`` is supported.
        order: ``"desc"`` reverses the list after the optional sort.
        limit: Page size.  ``None`` returns every matching image.
        page: One-based page number, only meaningful with ``limit``.
    """

    gallery_path: Path | None = None
    collection: str | None = None
    sort_by: Literal["captureDate"] | None = None
    order: Literal["asc", "desc"] | None = None
    limit: int | None = Field(default=None, ge=1)
    page: int = Field(default=1, ge=1)


class ResolvedImage(BaseModel):
    """A manifest entry joined with its discovered asset."""

    src: ImageAsset
    title: str | None = None
    description: str | None = None
    collections: list[str] = Field(default_factory=list)


class ImagePage(BaseModel):
    """One page of resolved images plus the unpaginated match count."""

    images: list[ResolvedImage]
    total: int


def validate_collection_references(gallery: GalleryData) -> None:
    """Ensure every image only references declared or built-in collections.

    Raises:
        ImageStoreError: Naming the unknown collections and the image path
            of the first offending entry.
    """
    known_ids = {collection.id for collection in gallery.collections}
    known_ids.update(BUILT_IN_COLLECTIONS)

    for image in gallery.images:
        invalid = [col for col in image.meta.collections if col not in known_ids]
        if invalid:
            raise ImageStoreError(
                f"Invalid collection(s) [{', '.join(invalid)}] referenced in image: {image.path}"
            )


def filter_images_by_collection(
    images: list[GalleryImage], collection: str | None
) -> list[GalleryImage]:
    """Keep only images in *collection*; no collection keeps everything."""
    if not collection:
        return list(images)
    return [image for image in images if collection in image.meta.collections]


def _capture_date_key(image: GalleryImage) -> tuple[bool, float]:
    # Images without a date sort before every dated image.
    captured = image.capture_date
    if captured is None:
        return (False, 0.0)
    return (True, captured.timestamp())


def sort_images(
    images: list[GalleryImage],
    sort_by: str | None = None,
    order: str | None = None,
) -> list[GalleryImage]:
    """Sort by capture date ascending, then reverse when ``order == "desc"``.

    The reversal is applied even when ``sort_by`` is not set, so a
    descending request without a sort key returns the manifest order
    reversed.
    """
    result = list(images)
    if sort_by:
        result.sort(key=_capture_date_key)
    if order == "desc":
        result.reverse()
    return result


def paginate_images(
    images: list[GalleryImage], page: int = 1, limit: int | None = None
) -> list[GalleryImage]:
    """Return the slice for a one-based *page*, or everything without a limit."""
    if not limit:
        return list(images)
    offset = (page - 1) * limit
    return images[offset : offset + limit]


class ImageStore:
    """Read-only access to the gallery described by a manifest.

    Args:
        assets: Catalog of discovered image files.
        project_root: Directory that manifest paths and asset keys are
            relative to.
        default_gallery_path: Manifest used when a call does not name one.
    """

    def __init__(
        self,
        assets: AssetCatalog,
        project_root: Path | str = Path("."),
        default_gallery_path: Path | str = DEFAULT_GALLERY_PATH,
    ):
        self.assets = assets
        self.project_root = Path(project_root)
        self.default_gallery_path = Path(default_gallery_path)

    def _manifest_file(self, gallery_path: Path) -> Path:
        return self.project_root / gallery_path

    def _manifest_key_dir(self, gallery_path: Path) -> str:
        """Directory of the manifest in asset-key form."""
        if gallery_path.is_absolute():
            try:
                gallery_path = gallery_path.resolve().relative_to(self.project_root.resolve())
            except ValueError:
                pass
        return gallery_path.parent.as_posix()

    def _load_gallery_data(self, gallery_path: Path) -> GalleryData:
        try:
            gallery = load_gallery(self._manifest_file(gallery_path))
            validate_collection_references(gallery)
            return gallery
        except (GalleryLoadError, ImageStoreError) as e:
            raise ImageStoreError(
                f"Failed to load gallery data from {gallery_path}: {e}"
            ) from e

    def get_images(self, options: GetImagesOptions | None = None, **kwargs) -> ImagePage:
        """Return one page of resolved images and the total match count.

        Args:
            options: Query options.  Keyword arguments are accepted instead
                and validated into :class:`GetImagesOptions`; passing both
                is an error.

        Returns:
            :class:`ImagePage` whose ``total`` counts every image matching
            the collection filter, independent of ``page`` and ``limit``.

        Raises:
            ImageStoreError: If the manifest cannot be loaded or references
                an unknown collection.
            TypeError: If both ``options`` and keyword arguments are given.
        """
        if options is not None and kwargs:
            raise TypeError(
                f"get_images() takes options or keyword arguments, not both: {sorted(kwargs)}"
            )
        if options is None:
            options = GetImagesOptions(**kwargs)
        gallery_path = options.gallery_path or self.default_gallery_path

        try:
            images = self._load_gallery_data(gallery_path).images
            images = filter_images_by_collection(images, options.collection)
            images = sort_images(images, options.sort_by, options.order)

            total = len(images)
            page_images = paginate_images(images, options.page, options.limit)

            resolved = self._resolve_images(page_images, gallery_path)
        except ImageStoreError as e:
            raise ImageStoreError(f"Failed to load images from {gallery_path}: {e}") from e

        return ImagePage(images=resolved, total=total)

    def _resolve_images(
        self, images: list[GalleryImage], gallery_path: Path
    ) -> list[ResolvedImage]:
        """Join entries with their assets, dropping entries with no file."""
        base_dir = self._manifest_key_dir(gallery_path)
        resolved: list[ResolvedImage] = []

        for entry in images:
            key = normalize_asset_key(posixpath.join(base_dir, entry.path))
            try:
                asset = self.assets.resolve(key)
            except AssetNotFoundError as e:
                logger.warning(f"{e}")
                continue

            resolved.append(
                ResolvedImage(
                    src=asset,
                    title=entry.meta.title,
                    description=entry.meta.description,
                    collections=list(entry.meta.collections),
                )
            )

        return resolved

    def get_collections(self, gallery_path: Path | str | None = None) -> list[Collection]:
        """Return the collections declared by the manifest.

        Raises:
            ImageStoreError: If the manifest cannot be loaded or is invalid.
        """
        path = Path(gallery_path) if gallery_path is not None else self.default_gallery_path
        return self._load_gallery_data(path).collections
