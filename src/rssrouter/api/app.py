"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI

from rssrouter.api.routes import router
from rssrouter.config import AppConfig
from rssrouter.services.dispatcher import RequestDispatcher


def create_app(
    config: AppConfig | None = None, *, dispatcher: RequestDispatcher | None = None
) -> FastAPI:
    """Build the application around ``dispatcher``.

    When neither argument is given the configuration is loaded from disk, which
    raises :class:`~rssrouter.errors.ConfigLoadError` if it is missing or invalid.
    """

    if dispatcher is None:
        dispatcher = RequestDispatcher(config if config is not None else AppConfig.from_file())

    app = FastAPI(title="RSS Router", description="Generate RSS feeds from configured sites")
    app.state.dispatcher = dispatcher
    app.include_router(router)
    return app
