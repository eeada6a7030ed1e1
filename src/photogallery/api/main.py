"""Photo gallery FastAPI application.

This module defines the application factory, the JSON API routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application follows a stateless REST pattern:

- **Image assets** are discovered once at startup into a read-only
  :class:`~photogallery.core.assets.AssetCatalog`, which is injected into an
  :class:`~photogallery.core.image_store.ImageStore` stored on ``app.state``.
- **The manifest** (``gallery.yaml``) is re-read on every request, so the
  gallery can be edited without restarting the server.
- **Image files** are served under the configured assets URL prefix by a
  ``StaticFiles`` subclass that only serves files in the asset catalog.
- **Errors** never leak details to clients: any failure becomes a ``500``
  with a generic JSON ``error`` body and is logged server-side.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/api/images``               Page of images with ``total``
GET       ``/api/images.json``          Page of images with ``hasMore``
GET       ``/api/collections``          Collections declared in the manifest
GET       ``/assets/...``               Image files
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    photogallery

Direct invocation::

    python -m photogallery.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import PurePath

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response
from starlette.types import Scope

from photogallery import __version__
from photogallery.api.models import (
    CollectionItem,
    CollectionsResponse,
    ErrorResponse,
    ImageItem,
    ImageJsonItem,
    ImagesJsonResponse,
    ImagesResponse,
)
from photogallery.core.assets import AssetCatalog
from photogallery.core.config import GalleryConfig, config
from photogallery.core.image_store import GetImagesOptions, ImageStore

logger = logging.getLogger(__name__)

IMAGES_ERROR = "Failed to fetch images"
COLLECTIONS_ERROR = "Failed to fetch collections"

router = APIRouter()


# ---------------------------------------------------------------------------
# Static image serving.
# ---------------------------------------------------------------------------


class CatalogStaticFiles(StaticFiles):
    """``StaticFiles`` restricted to the images in an asset catalog.

    The asset directory also holds the manifest and any other source files,
    so only paths that discovery recorded as images are served.  Everything
    else is a 404, exactly like a file that does not exist.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.allowed_paths: frozenset[str] = frozenset()

    def allow_catalog(self, catalog: AssetCatalog, url_prefix: str) -> None:
        """Serve exactly the catalog assets whose ``src`` lies under *url_prefix*."""
        prefix = url_prefix.rstrip("/") + "/"
        self.allowed_paths = frozenset(
            asset.src[len(prefix) :] for asset in catalog.values() if asset.src.startswith(prefix)
        )

    async def get_response(self, path: str, scope: Scope) -> Response:
        if PurePath(path).as_posix() not in self.allowed_paths:
            raise HTTPException(status_code=404)
        return await super().get_response(path, scope)


# ---------------------------------------------------------------------------
# Request helpers.
# ---------------------------------------------------------------------------


def _parse_int(value: str | None, default: int) -> int:
    """Parse a query-string integer, falling back to *default* when absent.

    Raises:
        ValueError: If the value is present but not plain ASCII digits.
    """
    if value is None or value == "":
        return default
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"Expected a non-negative integer, got {value!r}")
    return int(value)


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=message).model_dump(),
    )


def _store(request: Request) -> ImageStore:
    return request.app.state.image_store


def _page_options(
    request: Request,
    collection: str | None,
    page: str | None,
    limit: str | None,
) -> GetImagesOptions:
    """Build store options from raw query-string values."""
    settings: GalleryConfig = request.app.state.config
    return GetImagesOptions(
        collection=collection or None,
        page=_parse_int(page, 1),
        limit=_parse_int(limit, settings.default_page_size),
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/api/images", response_model=ImagesResponse)
async def get_images(
    request: Request,
    collection: str | None = None,
    page: str | None = None,
    limit: str | None = None,
):
    """Return one page of images and the total number of matches.

    Args:
        collection: Optional collection id to filter by.
        page: One-based page number (default ``1``).
        limit: Page size (default from configuration, ``30``).

    Returns:
        Dictionary with ``images`` (``src``, ``width``, ``height``,
        ``title``, ``description``) and ``total``.  Any failure returns
        ``500`` with ``{"error": "Failed to fetch images"}``.
    """
    try:
        options = _page_options(request, collection, page, limit)
        result = _store(request).get_images(options)
    except Exception as e:
        logger.error(f"GET /api/images failed: {e}", exc_info=True)
        return _error_response(IMAGES_ERROR)

    return ImagesResponse(
        images=[ImageItem.from_resolved(image) for image in result.images],
        total=result.total,
    )


@router.get("/api/images.json", response_model=ImagesJsonResponse)
async def get_images_json(
    request: Request,
    collection: str | None = None,
    page: str | None = None,
    limit: str | None = None,
):
    """Return one page of images and whether more pages follow.

    The image title is sent as ``alt``.  ``hasMore`` is true while
    ``page * limit`` is below the total number of matches.
    """
    try:
        options = _page_options(request, collection, page, limit)
        result = _store(request).get_images(options)
    except Exception as e:
        logger.error(f"GET /api/images.json failed: {e}", exc_info=True)
        return _error_response(IMAGES_ERROR)

    end_index = options.page * options.limit
    return ImagesJsonResponse(
        images=[ImageJsonItem.from_resolved(image) for image in result.images],
        has_more=end_index < result.total,
    )


@router.get("/api/collections", response_model=CollectionsResponse)
async def get_collections(request: Request):
    """Return the collections declared in the gallery manifest."""
    try:
        collections = _store(request).get_collections()
    except Exception as e:
        logger.error(f"GET /api/collections failed: {e}", exc_info=True)
        return _error_response(COLLECTIONS_ERROR)

    return CollectionsResponse(
        collections=[CollectionItem.from_collection(c) for c in collections]
    )


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: GalleryConfig | None = None,
    assets: AssetCatalog | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global ``config``.
        assets: Pre-built asset catalog.  When omitted, the asset directory
            is scanned once during application startup.

    Returns:
        The configured application.
    """
    settings = settings or config
    url_prefix = settings.assets_url_prefix.rstrip("/") or "/assets"

    # check_dir=False so the app can be built before the asset tree exists.
    static_files = CatalogStaticFiles(directory=str(settings.asset_root), check_dir=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Discover image assets and build the image store on startup."""
        catalog = assets
        if catalog is None:
            catalog = AssetCatalog.discover(
                settings.project_root,
                settings.asset_dir,
                settings.assets_url_prefix,
            )
        static_files.allow_catalog(catalog, url_prefix)
        app.state.image_store = ImageStore(
            catalog,
            project_root=settings.project_root,
            default_gallery_path=settings.gallery_path,
        )
        logger.info(f"ImageStore initialised with {len(catalog)} assets.")

        yield

        logger.info("Photo gallery shutting down.")

    app = FastAPI(
        title="Photo Gallery",
        description="Paginated image API for a YAML-described photo gallery.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = settings

    # The frontend may be served from a separate static host.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router)

    app.mount(url_prefix, static_files, name="assets")
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port, and log level from :data:`~photogallery.core.config.config`
    (``PHOTOGALLERY_SERVER_HOST``, ``PHOTOGALLERY_SERVER_PORT``,
    ``PHOTOGALLERY_LOG_LEVEL``).  Defaults to ``0.0.0.0:4321``.

    This function is registered as the ``photogallery`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "photogallery.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
