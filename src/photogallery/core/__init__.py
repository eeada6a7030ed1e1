"""Core functionality for the photo gallery.

This package holds everything below the HTTP layer:

- **config**: Environment-based configuration using Pydantic Settings
  (``PHOTOGALLERY_`` prefix, optional ``.env`` file)
- **manifest**: Pydantic models for ``gallery.yaml`` and the YAML loader
- **assets**: One-shot discovery of image files into a read-only catalog
- **image_store**: Collection filtering, capture-date sorting, pagination,
  and resolution of manifest entries against the asset catalog

Usage Example
-------------
    from photogallery.core import AssetCatalog, ImageStore, config

    catalog = AssetCatalog.discover(config.project_root, config.asset_dir)
    store = ImageStore(catalog, config.project_root, config.gallery_path)
    page = store.get_images(collection="travel", limit=30, page=1)
    print(page.total, [image.title for image in page.images])
"""

from photogallery.core.assets import AssetCatalog, AssetNotFoundError, ImageAsset
from photogallery.core.config import GalleryConfig, config
from photogallery.core.image_store import (
    BUILT_IN_COLLECTIONS,
    FEATURED_COLLECTION_ID,
    GetImagesOptions,
    ImagePage,
    ImageStore,
    ImageStoreError,
    ResolvedImage,
)
from photogallery.core.manifest import (
    Collection,
    GalleryData,
    GalleryImage,
    GalleryLoadError,
    load_gallery,
)

__all__ = [
    "AssetCatalog",
    "AssetNotFoundError",
    "BUILT_IN_COLLECTIONS",
    "Collection",
    "FEATURED_COLLECTION_ID",
    "GalleryConfig",
    "GalleryData",
    "GalleryImage",
    "GalleryLoadError",
    "GetImagesOptions",
    "ImageAsset",
    "ImagePage",
    "ImageStore",
    "ImageStoreError",
    "ResolvedImage",
    "config",
    "load_gallery",
]
