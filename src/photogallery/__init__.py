"""Photo gallery - YAML-described image gallery with a paginated JSON API."""

__version__ = "0.1.0"

from photogallery.core.assets import AssetCatalog, ImageAsset
from photogallery.core.config import GalleryConfig, config
from photogallery.core.image_store import GetImagesOptions, ImageStore, ImageStoreError

__all__ = [
    "AssetCatalog",
    "GalleryConfig",
    "GetImagesOptions",
    "ImageAsset",
    "ImageStore",
    "ImageStoreError",
    "config",
]
