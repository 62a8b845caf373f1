"""API routes exposing feed generation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, Response

from rssrouter.errors import SiteNotFoundError
from rssrouter.services.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
SITE_NOT_FOUND_MESSAGE = "Site not found in configuration"
GENERATION_FAILED_MESSAGE = "Failed to generate RSS"


def get_dispatcher(request: Request) -> RequestDispatcher:
    """Return the dispatcher attached to the running application."""

    return request.app.state.dispatcher


@router.get("/generate_rss")
async def generate_rss(request: Request, site: str = "") -> Response:
    """Return the RSS feed for the configured ``site``."""

    dispatcher = get_dispatcher(request)
    try:
        body = await run_in_threadpool(dispatcher.generate, site)
    except SiteNotFoundError:
        return PlainTextResponse(SITE_NOT_FOUND_MESSAGE, status_code=404)
    except Exception:  # noqa: BLE001 - every generation failure maps to a 500
        logger.exception("Error generating RSS for site %s", site)
        return PlainTextResponse(GENERATION_FAILED_MESSAGE, status_code=500)

    return Response(content=body, media_type=RSS_MEDIA_TYPE)
