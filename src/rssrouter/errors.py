"""Exception hierarchy shared by the configuration, fetch and feed layers."""

from __future__ import annotations

__all__ = [
    "RSSRouterError",
    "ConfigLoadError",
    "SiteNotFoundError",
    "FetchError",
    "ParseError",
    "SerializeError",
    "DateParseError",
]


class RSSRouterError(Exception):
    """Base class for all errors raised by :mod:`rssrouter`."""


class ConfigLoadError(RSSRouterError):
    """Raised when the site configuration document cannot be read or validated."""


class SiteNotFoundError(RSSRouterError, LookupError):
    """Raised when a site key is not present in the configuration."""

    def __init__(self, site_key: str) -> None:
        super().__init__(f"Site not found in configuration: {site_key!r}")
        self.site_key = site_key


class FetchError(RSSRouterError):
    """Raised when a URL cannot be retrieved or its body cannot be read."""


class ParseError(RSSRouterError):
    """Raised when fetched markup cannot be parsed into a document tree."""


class SerializeError(RSSRouterError):
    """Raised when a feed document cannot be serialised."""


class DateParseError(RSSRouterError, ValueError):
    """Raised when a published date does not match the configured layout."""
