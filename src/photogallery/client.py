"""Incremental "load more" client for the images API.

:class:`GridFeed` mirrors what the gallery page's grid does in the browser:
page 1 is rendered up front, and each "load more" request fetches the next
page from ``GET /api/images`` and appends it to the already-shown list.

Any ``httpx.Client`` works as transport, including FastAPI's ``TestClient``::

    with httpx.Client(base_url="http://localhost:4321") as http:
        feed = GridFeed(http, total=35, page_size=30, initial_images=first_page)
        while feed.has_more:
            feed.load_more()
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

logger = logging.getLogger(__name__)

Listener = Callable[[list[dict]], None]


class GridFeed:
    """Client-side state of the paginated image grid.

    Args:
        http_client: Client used for API requests (must carry the base URL).
        total: Total number of images known from the first page.
        page_size: Images requested per page.
        initial_images: Images already shown (page 1).
        collection: Optional collection filter passed through to the API.
        endpoint: API path to fetch pages from.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        total: int,
        page_size: int = 30,
        initial_images: list[dict] | None = None,
        collection: str | None = None,
        endpoint: str = "/api/images",
    ):
        self.http_client = http_client
        self.total = total
        self.page_size = page_size
        self.collection = collection
        self.endpoint = endpoint
        self.images: list[dict] = list(initial_images or [])
        self.next_page = 2
        self.is_loading = False
        self.exhausted = False
        self._listeners: list[Listener] = []

    @property
    def has_more(self) -> bool:
        """True while the server may still hold unshown images.

        ``total`` counts manifest entries, including ones whose file is
        missing and never returned, so the image count alone may never reach
        it.  The feed also stops once the last page has been fetched or a
        page comes back empty.
        """
        return not self.exhausted and len(self.images) < self.total

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with the full list after each change."""
        self._listeners.append(listener)

    def _params(self) -> dict[str, str | int]:
        params: dict[str, str | int] = {"page": self.next_page, "limit": self.page_size}
        if self.collection:
            params["collection"] = self.collection
        return params

    def load_more(self) -> list[dict]:
        """Fetch the next page and append it.

        Returns:
            The newly appended images; empty when nothing was loaded, when a
            request is already running, or when the total has been reached.
        """
        if self.is_loading or not self.has_more:
            return []

        self.is_loading = True
        try:
            response = self.http_client.get(self.endpoint, params=self._params())
            response.raise_for_status()
            new_images = response.json().get("images") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch more images: {e}")
            return []
        finally:
            self.is_loading = False

        if not new_images or self.next_page * self.page_size >= self.total:
            self.exhausted = True

        if new_images:
            self.images.extend(new_images)
            self.next_page += 1
            for listener in self._listeners:
                listener(self.images)

        return new_images
