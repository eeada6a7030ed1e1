"""Image asset discovery and lookup.

All image files under the asset directory are discovered once, at
application startup, and collected into a read-only :class:`AssetCatalog`.
The catalog is passed explicitly to the image store, so nothing in the
request path touches the file system tree except the manifest itself.

Keys are project-root-relative posix paths with a leading slash, for example
``/src/gallery/images/lisbon.jpg``.  The image store builds the same key
from the manifest's directory and an entry's relative ``path``.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif"})


class AssetNotFoundError(KeyError):
    """Raised when no discovered asset matches a requested key."""

    def __str__(self) -> str:
        return f"Image not found: {self.args[0]}"


@dataclass(frozen=True)
class ImageAsset:
    """A discovered image file.

    Attributes:
        src: URL the image is served from.
        width: Width in pixels.
        height: Height in pixels.
    """

    src: str
    width: int
    height: int


def normalize_asset_key(path: str) -> str:
    """Normalise a path into catalog key form (``/a/b.jpg``)."""
    return posixpath.normpath("/" + path.replace("\\", "/").lstrip("/"))


class AssetCatalog(Mapping[str, ImageAsset]):
    """Read-only lookup table of discovered image assets."""

    def __init__(self, assets: Mapping[str, ImageAsset] | None = None):
        self._assets = MappingProxyType(
            {normalize_asset_key(key): asset for key, asset in (assets or {}).items()}
        )

    def __getitem__(self, key: str) -> ImageAsset:
        return self._assets[normalize_asset_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __repr__(self) -> str:
        return f"AssetCatalog({len(self)} assets)"

    def resolve(self, key: str) -> ImageAsset:
        """Return the asset stored under *key*.

        Raises:
            AssetNotFoundError: If no asset was discovered at that path.
        """
        try:
            return self[key]
        except KeyError:
            raise AssetNotFoundError(normalize_asset_key(key)) from None

    @classmethod
    def discover(
        cls,
        project_root: Path,
        asset_dir: Path,
        url_prefix: str = "/assets",
    ) -> AssetCatalog:
        """Scan *asset_dir* recursively and build a catalog.

        Args:
            project_root: Directory that catalog keys are relative to.
            asset_dir: Directory to scan, relative to ``project_root`` (or
                absolute, in which case it must lie inside it).
            url_prefix: URL prefix the asset directory is served under.

        Returns:
            A catalog containing every readable image file found.
        """
        project_root = Path(project_root).resolve()
        scan_root = (project_root / asset_dir).resolve()
        prefix = url_prefix.rstrip("/")

        if not scan_root.is_relative_to(project_root):
            raise ValueError(f"Asset directory {scan_root} is outside {project_root}")
        if not scan_root.is_dir():
            logger.warning(f"Asset directory does not exist: {scan_root}")
            return cls()

        assets: dict[str, ImageAsset] = {}
        for file_path in sorted(scan_root.rglob("*")):
            if not file_path.is_file() or file_path.suffix.lower() not in IMAGE_EXTENSIONS:
                continue

            try:
                with Image.open(file_path) as image:
                    width, height = image.size
            except (UnidentifiedImageError, OSError) as e:
                logger.warning(f"Skipping unreadable image {file_path}: {e}")
                continue

            key = "/" + file_path.relative_to(project_root).as_posix()
            src = f"{prefix}/{file_path.relative_to(scan_root).as_posix()}"
            assets[key] = ImageAsset(src=src, width=width, height=height)

        logger.info(f"Discovered {len(assets)} image assets under {scan_root}")
        return cls(assets)
