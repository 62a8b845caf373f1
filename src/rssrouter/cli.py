"""Command line entry points for serving or rendering feeds."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

import uvicorn

from rssrouter.api.app import create_app
from rssrouter.config import AppConfig
from rssrouter.errors import ConfigLoadError, RSSRouterError, SiteNotFoundError
from rssrouter.services.dispatcher import RequestDispatcher

HOST = "0.0.0.0"
PORT = 4000
LOG_LEVEL_ENV = "RSSROUTER_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rssrouter", description="Serve RSS feeds for configured sites.")
    parser.add_argument("--config", default=None, help="Path to the YAML site configuration")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "INFO"),
        help="Logging level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help=f"Run the HTTP server on port {PORT}")
    render = subparsers.add_parser("render", help="Write the feed for one site to stdout")
    render.add_argument("site", help="Site key from the configuration")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Load the site configuration, then serve or render feeds."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s: %(message)s")

    try:
        config = AppConfig.from_file(args.config)
    except ConfigLoadError as exc:
        logging.error("Could not load site configuration: %s", exc)
        return 1

    if args.command == "render":
        return _render(RequestDispatcher(config), args.site)

    logging.info("Server starting on :%d", PORT)
    uvicorn.run(create_app(config), host=HOST, port=PORT)
    return 0


def _render(dispatcher: RequestDispatcher, site: str) -> int:
    try:
        body = dispatcher.generate(site)
    except SiteNotFoundError as exc:
        logging.error("%s", exc)
        return 2
    except RSSRouterError as exc:
        logging.error("Error generating RSS: %s", exc)
        return 1

    sys.stdout.buffer.write(body)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
