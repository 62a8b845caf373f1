"""Service layer entry points for RSS Router."""

from __future__ import annotations

from .assembler import assemble  # noqa: F401
from .cache import DEFAULT_TTL, FetchCache  # noqa: F401
from .dispatcher import RequestDispatcher  # noqa: F401
from .extractor import extract  # noqa: F401
from .fetcher import ContentFetcher  # noqa: F401

__all__ = [
    "DEFAULT_TTL",
    "ContentFetcher",
    "FetchCache",
    "RequestDispatcher",
    "assemble",
    "extract",
]
