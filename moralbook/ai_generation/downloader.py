"""
Download illustration references and transcode them into embeddable data URIs.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any

import requests

from moralbook.common import NullCache, TTLCache

logger = logging.getLogger(__name__)

DATA_IMAGE_PREFIX = "data:image/"
DEFAULT_CONTENT_TYPE = "image/png"

_ACCEPTED_PREFIXES = ("http://", "https://", DATA_IMAGE_PREFIX)


def is_accepted_image_reference(reference: Any) -> bool:
    """True for remote ``http(s)`` references and embedded ``data:image/`` URIs, in any case."""
    return isinstance(reference, str) and reference.lower().startswith(_ACCEPTED_PREFIXES)


class ImageDownloader:
    """
    Fetch remote illustrations and return them as ``data:<type>;base64,...`` strings.

    Parameters
    ----------
    request_timeout:
        Timeout in seconds for each HTTP request.
    session:
        Optional :class:`requests.Session`. Mainly useful for testing.
    cache:
        Cache keyed by reference. Defaults to a small :class:`TTLCache`; pass a
        :class:`NullCache` to disable caching.
    """

    def __init__(
        self,
        *,
        request_timeout: float = 30.0,
        session: requests.Session | None = None,
        cache: TTLCache | NullCache | None = None,
    ) -> None:
        self.request_timeout = request_timeout
        self._session = session or requests.Session()
        self._cache = cache if cache is not None else TTLCache(max_size=64, ttl_seconds=3600.0)

    async def download_image_as_base64(self, reference: str) -> str:
        """
        Return an embeddable data URI for ``reference``.

        Data URIs are returned unchanged. Remote references are fetched in a worker
        thread so the event loop keeps serving other pages.
        """
        if not is_accepted_image_reference(reference):
            raise ValueError(f"Unsupported image reference scheme: {str(reference)[:40]!r}")

        if reference.lower().startswith(DATA_IMAGE_PREFIX):
            return reference

        cached = self._cache.get(reference)
        if cached is not None:
            return cached

        data_uri = await asyncio.to_thread(self._fetch_as_data_uri, reference)
        self._cache.set(reference, data_uri)
        return data_uri

    def _fetch_as_data_uri(self, url: str) -> str:
        logger.debug("Downloading image from %s", url[:80])
        response = self._session.get(url, timeout=self.request_timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        content_type = content_type.split(";", 1)[0].strip() or DEFAULT_CONTENT_TYPE
        encoded = base64.b64encode(response.content).decode("ascii")
        logger.debug("Downloaded %d bytes (%s)", len(response.content), content_type)
        return f"data:{content_type};base64,{encoded}"
