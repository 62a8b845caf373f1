"""Tests for :class:`rssrouter.services.fetcher.ContentFetcher`."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from rssrouter.errors import FetchError
from rssrouter.services.fetcher import ContentFetcher


class DummyResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self._content = content
        self.status_code = status_code

    @property
    def content(self) -> bytes:
        return self._content


class BrokenBodyResponse:
    status_code = 200

    @property
    def content(self) -> bytes:
        raise requests.exceptions.ChunkedEncodingError("connection reset")


def test_fetch_returns_raw_body() -> None:
    captured: dict[str, object] = {}

    def fake_get(url):
        captured["url"] = url
        return DummyResponse(b"<html>hi</html>")

    session = SimpleNamespace(get=fake_get)
    fetcher = ContentFetcher(session=session)

    assert fetcher.fetch("https://example.com") == b"<html>hi</html>"
    assert captured["url"] == "https://example.com"
    assert session.verify is False


def test_fetch_ignores_status_codes() -> None:
    session = SimpleNamespace(get=lambda url: DummyResponse(b"not found page", status_code=404))

    assert ContentFetcher(session=session).fetch("https://example.com/x") == b"not found page"


def test_network_errors_raise_fetch_error() -> None:
    def fake_get(url):
        raise requests.ConnectionError("dns failure")

    fetcher = ContentFetcher(session=SimpleNamespace(get=fake_get))

    with pytest.raises(FetchError, match="dns failure"):
        fetcher.fetch("https://example.com")


def test_body_read_errors_raise_fetch_error() -> None:
    fetcher = ContentFetcher(session=SimpleNamespace(get=lambda url: BrokenBodyResponse()))

    with pytest.raises(FetchError, match="read response body"):
        fetcher.fetch("https://example.com")


def test_default_session_disables_verification() -> None:
    fetcher = ContentFetcher()

    assert fetcher._session.verify is False


def test_fetcher_exposes_only_fetch() -> None:
    fetcher = ContentFetcher(session=SimpleNamespace(get=lambda url: DummyResponse(b"")))

    assert not callable(fetcher)
