"""FastAPI application for the hookbox server."""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from hookbox.host import create_host
from hookbox.server.routes import health, rewrite
from hookbox.video.rewrite import VideoRewriter

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from hookbox.config import HookboxConfig
    from hookbox.cron.runtime import CronRuntime
    from hookbox.host import HostRuntime

logger = logging.getLogger(__name__)


class HookboxServer:
    """Main server application.

    Serves the rewrite endpoints and, when given a cron runtime, runs the cron
    plugin for the lifetime of the app. Shutdown closes the runtime and host.
    """

    def __init__(
        self,
        config: "HookboxConfig",
        host: "HostRuntime | None" = None,
        cron: "CronRuntime | None" = None,
    ):
        self._config = config
        self._host = host or create_host(config)
        self._cron = cron
        self._rewriter = VideoRewriter(
            self._host,
            settings=config.video_cache,
            timezone=config.timezone,
        )
        self._app = self._create_app()

    @property
    def app(self) -> FastAPI:
        return self._app

    @property
    def rewriter(self) -> VideoRewriter:
        return self._rewriter

    def _create_app(self) -> FastAPI:
        @asynccontextmanager
        async def lifespan(app: FastAPI) -> "AsyncIterator[None]":
            logger.info("Starting hookbox server")
            if self._cron:
                await self._cron.scheduler.start()

            yield

            logger.info("Shutting down hookbox server")
            if self._cron:
                await self._cron.scheduler.stop()
                await self._cron.close()
            await self._host.close()

        app = FastAPI(
            title="hookbox",
            description="Video URL cache and cron job plugin",
            version="0.1.0",
            lifespan=lifespan,
        )

        app.state.server = self
        app.state.rewriter = self._rewriter
        app.state.host = self._host

        app.include_router(health.router, tags=["health"])
        app.include_router(rewrite.router, tags=["rewrite"])

        return app


def create_app(
    config: "HookboxConfig",
    host: "HostRuntime | None" = None,
    cron: "CronRuntime | None" = None,
) -> FastAPI:
    """Create the FastAPI application."""
    return HookboxServer(config=config, host=host, cron=cron).app
