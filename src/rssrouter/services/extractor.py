"""Selector driven extraction of feed entries from scraped HTML."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import List

import soupsieve
from bs4 import BeautifulSoup, Tag

from rssrouter.config import SiteConfig
from rssrouter.errors import ParseError
from rssrouter.models import FeedEntry
from rssrouter.services.timeparse import parse_published

__all__ = [
    "DATE_ATTRIBUTE",
    "NO_DESCRIPTION",
    "absolutize_link",
    "absolutize_root_relative",
    "compile_selector",
    "extract",
    "parse_article",
    "parse_markup",
    "wrap_html",
]

logger = logging.getLogger(__name__)

DATE_ATTRIBUTE = "datetime"
NO_DESCRIPTION = "No description available"
HTML_START_MARKER = "<!-- HTML content start -->"
HTML_END_MARKER = "<!-- HTML content end -->"


def parse_markup(content: bytes | str) -> BeautifulSoup:
    """Parse fetched page content with the lxml HTML parser."""

    try:
        return BeautifulSoup(content, "lxml")
    except Exception as exc:  # noqa: BLE001 - parser failures surface as ParseError
        raise ParseError(f"failed to parse HTML: {exc}") from exc


@lru_cache(maxsize=256)
def compile_selector(selector: str) -> soupsieve.SoupSieve | None:
    """Compile a CSS selector, returning ``None`` when it can never match."""

    if not selector.strip():
        return None
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as exc:
        logger.warning("Invalid selector %r will match nothing: %s", selector, exc)
        return None


def _select(node: Tag, selector: str) -> List[Tag]:
    compiled = compile_selector(selector)
    if compiled is None:
        return []
    return compiled.select(node)


def _select_one(node: Tag, selector: str) -> Tag | None:
    compiled = compile_selector(selector)
    if compiled is None:
        return None
    return compiled.select_one(node)


def _attribute(node: Tag | None, name: str) -> str:
    if node is None or not name:
        return ""
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value


def absolutize_link(base_url: str, link: str) -> str:
    """Prefix ``link`` with ``base_url`` unless it already starts with ``http``.

    This is plain string concatenation: slashes are not collapsed and ``.`` or
    ``..`` segments are not resolved.
    """

    if link.startswith("http"):
        return link
    return base_url + link


def absolutize_root_relative(base_url: str, value: str) -> str:
    """Prefix site-root-relative references (``/path``) with ``base_url``."""

    if value.startswith("/"):
        return base_url + value
    return value


def _rewrite_content_urls(content: Tag, base_url: str) -> None:
    for tag_name, attribute in (("a", "href"), ("img", "src")):
        for node in content.find_all(tag_name):
            value = node.get(attribute)
            if isinstance(value, str):
                node[attribute] = absolutize_root_relative(base_url, value)


def wrap_html(markup: str) -> str:
    """Wrap an HTML fragment in the markers that flag it as unescaped HTML."""

    return f"{HTML_START_MARKER}\n{markup}\n{HTML_END_MARKER}"


def parse_article(article: Tag, site: SiteConfig, now: datetime | None = None) -> FeedEntry:
    """Build a :class:`FeedEntry` from a single article node.

    Missing nodes or attributes yield empty values; they never drop the entry.
    """

    title_tag = _select_one(article, site.title_selector)
    title = title_tag.get_text() if title_tag is not None else ""

    link_tag = _select_one(article, site.link_selector)
    link = absolutize_link(site.url, _attribute(link_tag, site.link_attribute_name))

    date_tag = _select_one(article, site.date_selector)
    published = _attribute(date_tag, DATE_ATTRIBUTE)

    content_tag = _select_one(article, site.content_selector)
    description = ""
    if content_tag is not None:
        _rewrite_content_urls(content_tag, site.url)
        description = content_tag.decode_contents()
    if not description:
        description = NO_DESCRIPTION

    return FeedEntry(
        title=title,
        link=link,
        description=wrap_html(description),
        created=parse_published(published, site.date_format, now=now),
    )


def extract(markup: BeautifulSoup | bytes | str, site: SiteConfig) -> List[FeedEntry]:
    """Return one entry per node matching ``site.article_selector``, in document order."""

    document = markup if isinstance(markup, BeautifulSoup) else parse_markup(markup)
    articles = _select(document, site.article_selector)
    logger.info("Found %d articles", len(articles))
    return [parse_article(article, site) for article in articles]
