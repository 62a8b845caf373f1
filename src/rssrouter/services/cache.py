"""Time-bounded in-memory cache of fetched URL content."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Iterator

__all__ = ["CacheEntry", "DEFAULT_TTL", "FetchCache", "ReadWriteLock"]

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=5)


class ReadWriteLock:
    """Lock allowing many concurrent readers or one exclusive writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            # Waiting writers get priority so a steady stream of hits cannot starve them.
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


@dataclass(frozen=True)
class CacheEntry:
    """Content fetched for a URL and the monotonic instant it goes stale."""

    content: bytes
    expires_at: float


class FetchCache:
    """Keyed store of fetched bytes, refreshed once an entry's TTL has passed.

    Fetching happens outside the lock, so two callers racing on a cold or
    expired URL both fetch and the last one to finish is what gets stored.
    Entries are never evicted.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = ReadWriteLock()
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def entry(self, url: str) -> CacheEntry | None:
        """Return the stored entry for ``url`` whether or not it is fresh."""

        with self._lock.read_locked():
            return self._entries.get(url)

    def get_or_fetch(
        self,
        url: str,
        fetch_fn: Callable[[str], bytes],
        ttl: timedelta = DEFAULT_TTL,
    ) -> bytes:
        """Return cached content for ``url``, calling ``fetch_fn`` when stale or missing.

        Errors raised by ``fetch_fn`` propagate and leave any existing entry in place.
        """

        with self._lock.read_locked():
            cached = self._entries.get(url)
            if cached is not None and self._clock() < cached.expires_at:
                return cached.content

        logger.info("Fetching URL: %s", url)
        start = time.perf_counter()
        content = fetch_fn(url)
        logger.info("Fetched URL %s in %.2f seconds", url, time.perf_counter() - start)

        with self._lock.write_locked():
            self._entries[url] = CacheEntry(
                content=content, expires_at=self._clock() + ttl.total_seconds()
            )
        return content
