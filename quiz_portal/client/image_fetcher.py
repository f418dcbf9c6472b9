"""Downloads question images for the Qt client."""

from __future__ import annotations

import logging
from typing import Any

import requests

from quiz_portal.constants.network_constants import IMAGE_TIMEOUT_SECONDS
from quiz_portal.core.errors import DataUnavailable
from quiz_portal.core.image_urls import image_url_candidates

logger = logging.getLogger(__name__)


class ImageFetcher:
    """Fetches image bytes, walking the Drive fallback formats until one answers with an image."""

    def __init__(self, session: Any | None = None, timeout: float = IMAGE_TIMEOUT_SECONDS) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout
        self._cache: dict[str, bytes] = {}

    def fetch(self, url: str) -> bytes:
        if url in self._cache:
            return self._cache[url]

        candidates = image_url_candidates(url)
        if not candidates:
            raise DataUnavailable("No image URL given.")

        for attempt, candidate in enumerate(candidates, start=1):
            try:
                response = self._session.get(candidate, timeout=self._timeout)
            except requests.RequestException as exc:
                logger.warning("Image attempt %d (%s) failed: %s", attempt, candidate, exc)
                continue

            content_type = response.headers.get("Content-Type", "")
            if response.status_code == 200 and content_type.startswith("image/"):
                self._cache[url] = response.content
                return response.content
            logger.warning(
                "Image attempt %d (%s) returned %d %s",
                attempt,
                candidate,
                response.status_code,
                content_type or "without a content type",
            )

        raise DataUnavailable(f"Image could not be loaded after {len(candidates)} attempts.")
