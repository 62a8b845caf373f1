"""Tests for the ``rssrouter`` command line."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from rssrouter import cli
from rssrouter.errors import FetchError
from rssrouter.services.cache import FetchCache
from rssrouter.services.dispatcher import RequestDispatcher

CONFIG_YAML = """
sites:
  upstream:
    url: https://news.example.org
    existing_rss_url: https://news.example.org/feed.xml
"""


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


def _dispatcher_with(fetch):
    return lambda config: RequestDispatcher(config, FetchCache(), fetch=fetch)


def test_missing_config_exits_with_error(tmp_path: Path) -> None:
    assert cli.main(["--config", str(tmp_path / "nope.yaml"), "render", "x"]) == 1


def test_render_writes_feed_to_stdout(config_path: Path, monkeypatch, capsysbinary) -> None:
    monkeypatch.setattr(cli, "RequestDispatcher", _dispatcher_with(lambda url: b"<rss/>"))

    assert cli.main(["--config", str(config_path), "render", "upstream"]) == 0
    assert capsysbinary.readouterr().out == b"<rss/>"


def test_render_unknown_site(config_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "RequestDispatcher", _dispatcher_with(lambda url: b""))

    assert cli.main(["--config", str(config_path), "render", "missing"]) == 2


def test_render_fetch_failure(config_path: Path, monkeypatch) -> None:
    def failing(url: str) -> bytes:
        raise FetchError("down")

    monkeypatch.setattr(cli, "RequestDispatcher", _dispatcher_with(failing))

    assert cli.main(["--config", str(config_path), "render", "upstream"]) == 1


def test_serve_runs_uvicorn_on_port_4000(config_path: Path) -> None:
    with patch("rssrouter.cli.uvicorn.run") as mock_run:
        assert cli.main(["--config", str(config_path)]) == 0

    mock_run.assert_called_once()
    assert mock_run.call_args.kwargs == {"host": "0.0.0.0", "port": 4000}
