"""Serialisation of extracted entries into RSS 2.0 documents."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Sequence

from lxml import etree

from rssrouter.config import SiteConfig
from rssrouter.errors import SerializeError
from rssrouter.models import Feed, FeedEntry

__all__ = ["HTML_NOTICE", "assemble", "build_feed", "render_rss", "xml_safe"]

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
HTML_NOTICE = "<!-- Item descriptions contain HTML content -->"

# Characters outside the XML 1.0 Char production are replaced, not rejected.
_INVALID_XML_CHARS = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def _rfc1123(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value)


def xml_safe(text: str) -> str:
    """Replace characters XML cannot carry with U+FFFD."""

    return _INVALID_XML_CHARS.sub("\ufffd", text)


def _text_element(parent: etree._Element, tag: str, text: str) -> etree._Element:
    element = etree.SubElement(parent, tag)
    element.text = xml_safe(text)
    return element


def build_feed(
    site: SiteConfig, entries: Sequence[FeedEntry], created: datetime | None = None
) -> Feed:
    """Combine site metadata and entries into a :class:`Feed`."""

    return Feed(
        title=site.title,
        link=site.url,
        description=site.description,
        created=created or datetime.now(timezone.utc),
        entries=list(entries),
    )


def render_rss(feed: Feed) -> str:
    """Serialise ``feed`` as an RSS 2.0 document."""

    try:
        rss = etree.Element("rss", nsmap={"content": CONTENT_NS})
        rss.set("version", "2.0")
        channel = etree.SubElement(rss, "channel")
        _text_element(channel, "title", feed.title)
        _text_element(channel, "link", feed.link)
        _text_element(channel, "description", feed.description)
        _text_element(channel, "pubDate", _rfc1123(feed.created))

        for entry in feed.entries:
            item = etree.SubElement(channel, "item")
            _text_element(item, "title", entry.title)
            _text_element(item, "link", entry.link)
            _text_element(item, "description", entry.description)
            _text_element(item, "guid", entry.id)
            _text_element(item, "pubDate", _rfc1123(entry.created))

        document = etree.tostring(
            rss, xml_declaration=True, encoding="UTF-8", pretty_print=True
        ).decode("utf-8")
    except (ValueError, TypeError, etree.LxmlError) as exc:
        raise SerializeError(f"failed to generate RSS: {exc}") from exc

    return document.replace("<rss", f"{HTML_NOTICE}\n<rss", 1)


def assemble(
    site: SiteConfig, entries: Sequence[FeedEntry], created: datetime | None = None
) -> str:
    """Build and serialise the feed for ``site`` from extracted ``entries``."""

    return render_rss(build_feed(site, entries, created))
