"""Serve RSS feeds scraped from configured sites or proxied from upstream feeds."""

from __future__ import annotations

from .config import AppConfig, SiteConfig  # noqa: F401

__all__ = ["AppConfig", "SiteConfig"]
