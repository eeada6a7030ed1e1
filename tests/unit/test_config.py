"""Tests for photogallery.core.config: configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the PHOTOGALLERY_ prefix.
- Pydantic validation constraints (port range, page size, log level).
- Path resolution of the asset directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from photogallery.core.config import GalleryConfig


class TestConfigDefaults:
    """Verify that GalleryConfig provides sensible defaults."""

    @pytest.fixture
    def default_config(self, monkeypatch) -> GalleryConfig:
        for name in (
            "PHOTOGALLERY_GALLERY_PATH",
            "PHOTOGALLERY_DEFAULT_PAGE_SIZE",
            "PHOTOGALLERY_SERVER_PORT",
            "PHOTOGALLERY_ASSETS_URL_PREFIX",
        ):
            monkeypatch.delenv(name, raising=False)
        return GalleryConfig(_env_file=None)

    def test_default_gallery_path(self, default_config):
        assert default_config.gallery_path == Path("src/gallery/gallery.yaml")

    def test_default_page_size(self, default_config):
        assert default_config.default_page_size == 30

    def test_default_server_port(self, default_config):
        assert default_config.server_port == 4321

    def test_default_assets_url_prefix(self, default_config):
        assert default_config.assets_url_prefix == "/assets"


class TestConfigEnvironment:
    """Verify PHOTOGALLERY_ environment overrides."""

    def test_env_overrides_page_size(self, monkeypatch):
        monkeypatch.setenv("PHOTOGALLERY_DEFAULT_PAGE_SIZE", "12")
        assert GalleryConfig(_env_file=None).default_page_size == 12

    def test_env_overrides_gallery_path(self, monkeypatch):
        monkeypatch.setenv("PHOTOGALLERY_GALLERY_PATH", "content/photos.yaml")
        assert GalleryConfig(_env_file=None).gallery_path == Path("content/photos.yaml")

    def test_env_prefix_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("photogallery_server_port", "8080")
        assert GalleryConfig(_env_file=None).server_port == 8080


class TestConfigValidation:
    """Verify Pydantic validation constraints on config fields."""

    def test_invalid_port_too_low(self):
        with pytest.raises(Exception):
            GalleryConfig(server_port=80, _env_file=None)

    def test_invalid_port_too_high(self):
        with pytest.raises(Exception):
            GalleryConfig(server_port=70000, _env_file=None)

    def test_invalid_page_size(self):
        with pytest.raises(Exception):
            GalleryConfig(default_page_size=0, _env_file=None)

    def test_invalid_log_level(self):
        with pytest.raises(Exception):
            GalleryConfig(log_level="LOUD", _env_file=None)


class TestConfigPathResolution:
    """Verify that path fields are properly resolved."""

    def test_paths_are_path_objects(self, test_config: GalleryConfig):
        assert isinstance(test_config.project_root, Path)
        assert isinstance(test_config.asset_dir, Path)
        assert isinstance(test_config.gallery_path, Path)

    def test_asset_root_joins_project_root(self, test_config: GalleryConfig, temp_dir: Path):
        assert test_config.asset_root == temp_dir / "src"
