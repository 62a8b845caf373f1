"""HTTP retrieval of pages and upstream feeds."""

from __future__ import annotations

import logging

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from rssrouter.errors import FetchError

__all__ = ["ContentFetcher"]

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Issue plain GET requests and return the raw response body.

    Certificate verification is disabled for every request, and the insecure
    request warning urllib3 would emit for each call is silenced process-wide.
    The status code is not inspected: an upstream 404 page is returned like any
    other body.
    """

    def __init__(self, session: requests.Session | None = None, *, verify: bool = False) -> None:
        self._session = session or requests.Session()
        self._session.verify = verify
        if not verify:
            urllib3.disable_warnings(InsecureRequestWarning)

    def fetch(self, url: str) -> bytes:
        """Return the body of ``url``, raising :class:`FetchError` on failure."""

        try:
            response = self._session.get(url)
        except requests.RequestException as exc:
            raise FetchError(f"failed to fetch the URL {url}: {exc}") from exc

        try:
            content = response.content
        except requests.RequestException as exc:
            raise FetchError(f"failed to read response body from {url}: {exc}") from exc

        logger.debug("GET %s returned %s (%d bytes)", url, response.status_code, len(content))
        return content
