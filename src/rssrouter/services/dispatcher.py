"""Resolve a site key and produce the feed body for it."""

from __future__ import annotations

import logging
import time
from typing import Callable

from rssrouter.config import AppConfig, SiteConfig
from rssrouter.services.assembler import assemble
from rssrouter.services.cache import FetchCache
from rssrouter.services.extractor import extract, parse_markup
from rssrouter.services.fetcher import ContentFetcher

__all__ = ["RequestDispatcher"]

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """Serve feeds for configured sites through a shared :class:`FetchCache`."""

    def __init__(
        self,
        config: AppConfig,
        cache: FetchCache | None = None,
        fetch: Callable[[str], bytes] | None = None,
    ) -> None:
        self.config = config
        self.cache = cache if cache is not None else FetchCache()
        self._fetch = fetch if fetch is not None else ContentFetcher().fetch

    def generate(self, site_key: str) -> bytes:
        """Return the feed body for ``site_key``.

        Raises :class:`~rssrouter.errors.SiteNotFoundError` before any network
        access when the key is unknown.
        """

        site = self.config.site(site_key)

        logger.info("RSS generation started for site: %s", site_key)
        start = time.perf_counter()
        if site.uses_existing_feed:
            body = self.fetch_existing(site)
        else:
            body = self.generate_from_scratch(site).encode("utf-8")
        logger.info("RSS generation completed in %.2f seconds", time.perf_counter() - start)
        return body

    def fetch_existing(self, site: SiteConfig) -> bytes:
        """Return the upstream feed for ``site`` exactly as it was fetched."""

        return self.cache.get_or_fetch(site.existing_rss_url, self._fetch)

    def generate_from_scratch(self, site: SiteConfig) -> str:
        """Scrape ``site.url`` and serialise the extracted entries as RSS."""

        content = self.cache.get_or_fetch(site.url, self._fetch)
        document = parse_markup(content)
        return assemble(site, extract(document, site))
