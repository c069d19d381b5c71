"""HTTP loader for webitor content files."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from webitor.config import Settings
from webitor.config import settings as default_settings
from webitor.types import WebitorError

logger = logging.getLogger(__name__)

NO_STORE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class LoadFailure(WebitorError):
    """The content file could not be fetched or is not a usable document."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to load data file {url}: {reason}")
        self.url = url
        self.reason = reason


class ContentLoader:
    """Fetches content files ({...metadata, data}) over HTTP.

    Every request carries a millisecond timestamp query parameter and
    no-store cache headers so edited files are never served stale.
    One request per call: no retries.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._transport = transport
        self._clock = clock or (lambda: int(time.time() * 1000))

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.BASE_URL,
            timeout=self._settings.FETCH_TIMEOUT,
            transport=self._transport,
        )

    async def fetch(self, url: str) -> dict[str, Any]:
        """
        Fetch and parse one content file.

        Args:
            url: Content file URL, absolute or relative to Settings.BASE_URL

        Returns:
            The parsed document, a dict with a "data" member

        Raises:
            LoadFailure: On transport errors, non-2xx responses, invalid JSON,
                or a body that is not an object with "data"
        """
        params = {"_": str(self._clock())} if self._settings.CACHE_BUST else None

        try:
            async with self._client() as client:
                response = await client.get(url, params=params, headers=NO_STORE_HEADERS)
        except httpx.HTTPError as e:
            raise LoadFailure(url, str(e)) from e

        if not response.is_success:
            raise LoadFailure(url, f"HTTP {response.status_code}")

        try:
            document = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LoadFailure(url, f"invalid JSON: {e}") from e

        if not isinstance(document, dict) or "data" not in document:
            raise LoadFailure(url, "document has no 'data' member")

        logger.info("loader: fetched %s (%d bytes)", url, len(response.content))
        return document
