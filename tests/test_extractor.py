"""Tests for selector driven extraction."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from rssrouter.config import SiteConfig
from rssrouter.services.extractor import (
    NO_DESCRIPTION,
    absolutize_link,
    absolutize_root_relative,
    compile_selector,
    extract,
    parse_article,
    parse_markup,
    wrap_html,
)

SITE = SiteConfig(
    url="https://example.com",
    title="Example",
    description="Example posts",
    article_selector="article.post",
    title_selector="h2",
    link_selector="h2 a",
    date_selector="time",
    content_selector="div.entry",
    date_format="2006-01-02T15:04:05Z07:00",
)

PAGE = """
<html>
  <body>
    <article class="post">
      <h2><a href="/posts/1">First <em>post</em></a></h2>
      <time datetime="2024-01-02T03:04:05Z">Jan 2</time>
      <div class="entry"><p>Hello <a href="/about">about</a> <img src="/img/a.png"> <a href="https://other.com/y">out</a></p></div>
    </article>
    <article class="post">
      <h2><a href="https://other.com/x">Second</a></h2>
      <time datetime="2024-01-03T00:00:00Z"></time>
      <div class="entry"><img src="img/relative.png"></div>
    </article>
    <article class="post">
      <h2><a href="/posts/3">Third</a></h2>
      <time datetime="2024-01-04T00:00:00Z"></time>
    </article>
  </body>
</html>
"""


def test_entries_follow_document_order() -> None:
    entries = extract(PAGE, SITE)

    assert [entry.title for entry in entries] == ["First post", "Second", "Third"]


def test_links_are_absolutized_by_prefix() -> None:
    entries = extract(PAGE, SITE)

    assert entries[0].link == "https://example.com/posts/1"
    assert entries[1].link == "https://other.com/x"
    assert entries[0].id == entries[0].link


def test_dates_are_parsed_from_datetime_attribute() -> None:
    entries = extract(PAGE, SITE)

    assert entries[0].created == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_content_urls_are_rewritten_and_wrapped() -> None:
    description = extract(PAGE, SITE)[0].description

    assert description.startswith("<!-- HTML content start -->\n<p>Hello ")
    assert description.endswith("</p>\n<!-- HTML content end -->")
    assert 'href="https://example.com/about"' in description
    assert 'src="https://example.com/img/a.png"' in description
    assert 'href="https://other.com/y"' in description


def test_only_root_relative_content_urls_are_rewritten() -> None:
    description = extract(PAGE, SITE)[1].description

    assert 'src="img/relative.png"' in description


def test_missing_content_uses_placeholder() -> None:
    entries = extract(PAGE, SITE)

    assert len(entries) == 3
    assert entries[2].description == wrap_html(NO_DESCRIPTION)


def test_empty_content_node_uses_placeholder() -> None:
    html = '<article class="post"><div class="entry"></div></article>'

    assert extract(html, SITE)[0].description == wrap_html(NO_DESCRIPTION)


def test_missing_fields_never_drop_the_entry() -> None:
    html = "<div><article class='post'><p>bare</p></article></div>"
    before = datetime.now(timezone.utc)

    entries = extract(html, SITE)

    after = datetime.now(timezone.utc)
    assert len(entries) == 1
    assert entries[0].title == ""
    assert entries[0].link == "https://example.com"
    assert before <= entries[0].created <= after


def test_malformed_date_falls_back_to_now() -> None:
    html = '<article class="post"><time datetime="last tuesday"></time></article>'
    now = datetime(2031, 5, 6, tzinfo=timezone.utc)

    article = parse_markup(html).select_one("article")
    entry = parse_article(article, SITE, now=now)

    assert entry.created == now


def test_link_attribute_name_is_configurable() -> None:
    site = SITE.model_copy(update={"link_selector": "h2", "link_attribute_name": "data-url"})
    html = '<article class="post"><h2 data-url="/custom">T</h2></article>'

    assert extract(html, site)[0].link == "https://example.com/custom"


def test_title_includes_nested_text_untrimmed() -> None:
    html = '<article class="post"><h2>\n  Spaced <b>title</b> </h2></article>'

    assert extract(html, SITE)[0].title == "\n  Spaced title "


def test_first_matching_node_is_used() -> None:
    html = '<article class="post"><h2>One</h2><h2>Two</h2></article>'

    assert extract(html, SITE)[0].title == "One"


def test_invalid_or_empty_selectors_match_nothing() -> None:
    site = SITE.model_copy(update={"title_selector": "h2[", "link_selector": ""})
    html = '<article class="post"><h2><a href="/p">Title</a></h2></article>'

    entries = extract(html, site)

    assert entries[0].title == ""
    assert entries[0].link == "https://example.com"
    assert compile_selector("h2[") is None
    assert compile_selector("   ") is None


def test_no_matching_articles_yields_no_entries() -> None:
    assert extract("<html><body><p>404 page</p></body></html>", SITE) == []


def test_accepts_raw_bytes() -> None:
    entries = extract(PAGE.encode("utf-8"), SITE)

    assert len(entries) == 3


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("/posts/1", "https://example.com/posts/1"),
        ("https://other.com/x", "https://other.com/x"),
        ("http://plain.example/x", "http://plain.example/x"),
        ("posts/1", "https://example.composts/1"),
        ("", "https://example.com"),
    ],
)
def test_absolutize_link(value: str, expected: str) -> None:
    assert absolutize_link("https://example.com", value) == expected


def test_absolutize_link_does_not_collapse_slashes() -> None:
    assert absolutize_link("https://example.com/", "/a/../b") == "https://example.com//a/../b"


def test_absolutize_root_relative_leaves_other_values() -> None:
    assert absolutize_root_relative("https://example.com", "/a") == "https://example.com/a"
    assert absolutize_root_relative("https://example.com", "a") == "a"
    assert absolutize_root_relative("https://example.com", "#top") == "#top"
