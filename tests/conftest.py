"""Shared pytest fixtures for photo gallery tests."""

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import pytest
import yaml
from fastapi.testclient import TestClient
from PIL import Image

from photogallery.api.main import create_app
from photogallery.core.assets import AssetCatalog
from photogallery.core.config import GalleryConfig
from photogallery.core.image_store import ImageStore

GALLERY_REL = Path("src/gallery/gallery.yaml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> GalleryConfig:
    """Create a test configuration rooted at the temporary directory."""
    (temp_dir / "src" / "gallery").mkdir(parents=True)
    return GalleryConfig(
        project_root=str(temp_dir),
        asset_dir="src",
        gallery_path=str(GALLERY_REL),
        _env_file=None,
    )


@pytest.fixture
def make_image(temp_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes a real image file under the project root.

    The helper takes a project-relative path and optional size, and returns
    the absolute path written.
    """

    def _make(rel_path: str, size: tuple[int, int] = (40, 30)) -> Path:
        path = temp_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        fmt = "PNG" if path.suffix.lower() == ".png" else "JPEG"
        Image.new("RGB", size, color=(120, 80, 40)).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def write_manifest(temp_dir: Path) -> Callable[[dict], Path]:
    """Return a helper that dumps a manifest dict to ``src/gallery/gallery.yaml``."""

    def _write(data: dict, rel_path: Path = GALLERY_REL) -> Path:
        path = temp_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_manifest() -> dict:
    """Three images in two collections, with mixed capture dates."""
    return {
        "collections": [
            {"id": "travel", "name": "Travel"},
            {"id": "family", "name": "Family"},
        ],
        "images": [
            {
                "path": "images/a.jpg",
                "meta": {
                    "title": "A",
                    "description": "First image",
                    "collections": ["travel"],
                },
                "exif": {"captureDate": "2023-05-01T10:00:00"},
            },
            {
                "path": "images/b.jpg",
                "meta": {
                    "title": "B",
                    "description": "Second image",
                    "collections": ["family", "featured"],
                },
            },
            {
                "path": "images/c.png",
                "meta": {
                    "title": "C",
                    "description": "Third image",
                    "collections": ["travel", "featured"],
                },
                "exif": {"captureDate": "2021-01-15T08:30:00"},
            },
        ],
    }


@pytest.fixture
def sample_gallery(
    test_config: GalleryConfig, make_image, write_manifest, sample_manifest
) -> GalleryConfig:
    """Write the sample manifest and its image files; return the config."""
    make_image("src/gallery/images/a.jpg", (40, 30))
    make_image("src/gallery/images/b.jpg", (30, 40))
    make_image("src/gallery/images/c.png", (50, 50))
    write_manifest(sample_manifest)
    return test_config


@pytest.fixture
def large_gallery(test_config: GalleryConfig, make_image, write_manifest) -> GalleryConfig:
    """A gallery of 35 uncategorised images named ``img00.jpg``..``img34.jpg``."""
    images = []
    for index in range(35):
        rel = f"photos/img{index:02d}.jpg"
        make_image(f"src/gallery/{rel}", (20, 10))
        images.append({"path": rel, "meta": {"title": f"Image {index}", "collections": []}})
    write_manifest({"collections": [], "images": images})
    return test_config


def build_store(settings: GalleryConfig) -> ImageStore:
    """Discover assets for *settings* and return a store over them."""
    catalog = AssetCatalog.discover(
        settings.project_root, settings.asset_dir, settings.assets_url_prefix
    )
    return ImageStore(catalog, settings.project_root, settings.gallery_path)


@pytest.fixture
def sample_store(sample_gallery: GalleryConfig) -> ImageStore:
    return build_store(sample_gallery)


@pytest.fixture
def large_store(large_gallery: GalleryConfig) -> ImageStore:
    return build_store(large_gallery)


@pytest.fixture
def test_client(sample_gallery: GalleryConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient over the sample gallery (lifespan runs on enter)."""
    with TestClient(create_app(sample_gallery)) as client:
        yield client


@pytest.fixture
def large_client(large_gallery: GalleryConfig) -> Generator[TestClient, None, None]:
    with TestClient(create_app(large_gallery)) as client:
        yield client
