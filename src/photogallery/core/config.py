"""Configuration management for the photo gallery.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PHOTOGALLERY_ prefix,
allowing the gallery to be pointed at a different manifest or image tree without
code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PHOTOGALLERY_* prefix)
2. .env file in the working directory
3. Default values defined in GalleryConfig

Example .env file:
    PHOTOGALLERY_PROJECT_ROOT=/srv/site
    PHOTOGALLERY_GALLERY_PATH=src/gallery/gallery.yaml
    PHOTOGALLERY_DEFAULT_PAGE_SIZE=30
    PHOTOGALLERY_SERVER_PORT=4321

Path Layout
-----------
``gallery_path`` and ``asset_dir`` are interpreted relative to
``project_root``.  Discovered image assets are keyed by their
project-root-relative path (``/src/gallery/a.jpg``), which is the same key
the image store builds from the manifest's directory and an entry's path.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Tests and embedding applications should construct their own instance and
pass it to :func:`photogallery.api.main.create_app`.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GalleryConfig(BaseSettings):
    """Main configuration for the photo gallery.

    Attributes
    ----------
    Paths:
        project_root : Path
            Root that asset keys and relative paths are resolved against
        asset_dir : Path
            Directory (relative to project_root) scanned for image files
        gallery_path : Path
            Manifest YAML file (relative to project_root)

    Serving:
        assets_url_prefix : str
            URL prefix under which discovered images are served
        default_page_size : int
            Page size used by the API when ``limit`` is not given

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root log level configured by the CLI entry point

    Examples
    --------
        >>> custom_config = GalleryConfig(
        ...     project_root="/srv/site",
        ...     default_page_size=24,
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PHOTOGALLERY_",
        case_sensitive=False,
    )

    # Paths
    project_root: Path = Field(
        default=Path("."),
        description="Root directory that asset keys are relative to",
    )
    asset_dir: Path = Field(
        default=Path("src"),
        description="Directory scanned for image files (relative to project_root)",
    )
    gallery_path: Path = Field(
        default=Path("src/gallery/gallery.yaml"),
        description="Gallery manifest YAML file (relative to project_root)",
    )

    # Serving
    assets_url_prefix: str = Field(
        default="/assets",
        description="URL prefix for serving discovered images",
    )
    default_page_size: int = Field(
        default=30,
        description="Default number of images per API page",
        ge=1,
        le=500,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=4321,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level for the CLI entry point",
    )

    @property
    def asset_root(self) -> Path:
        """Absolute-or-relative path of the asset directory on disk."""
        return self.project_root / self.asset_dir


# Global configuration instance, loaded from PHOTOGALLERY_* variables and .env.
config = GalleryConfig()
