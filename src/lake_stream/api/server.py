"""
API server for streamer status and metrics endpoints.

Provides HTTP endpoints for:
- /lake/v0/health - Health check endpoint
- /lake/v0/progress - Last accepted block and streamer counters
- /metrics - Prometheus metrics endpoint
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from aiohttp import web

from lake_stream.metrics import generate_metrics
from lake_stream.streamer import StreamerProgress

logger = logging.getLogger(__name__)

STATUS_HEALTHY: Final = "healthy"
"""Fixed healthy status returned by the health endpoint."""

SERVICE_NAME: Final = "lake-stream"
"""Fixed service identifier returned by the health endpoint."""


def _no_progress() -> StreamerProgress | None:
    """Default progress getter that returns None."""
    return None


async def _handle_health(_request: web.Request) -> web.Response:
    """Handle health check endpoint."""
    return web.json_response({"status": STATUS_HEALTHY, "service": SERVICE_NAME})


async def _handle_metrics(_request: web.Request) -> web.Response:
    """Handle Prometheus metrics endpoint."""
    return web.Response(
        body=generate_metrics(),
        content_type="text/plain; version=0.0.4; charset=utf-8",
    )


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Configuration for the API server."""

    host: str = "0.0.0.0"
    """Host address to bind to."""

    port: int = 5052
    """Port to listen on."""

    enabled: bool = True
    """Whether the API server is enabled."""


@dataclass(slots=True)
class ApiServer:
    """
    HTTP API server for streamer status.

    Provides endpoints for:
    - Health checks: Verify the process is running
    - Progress: Follow the streamer from outside the process

    Uses aiohttp to handle HTTP protocol details efficiently.
    """

    config: ApiServerConfig
    """Server configuration."""

    progress_getter: Callable[[], StreamerProgress | None] = _no_progress
    """Callable that returns the current streamer progress."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    _site: web.TCPSite | None = field(default=None, init=False)
    """The TCP site for the server."""

    @property
    def progress(self) -> StreamerProgress | None:
        """Get the current streamer progress."""
        return self.progress_getter()

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    def create_app(self) -> web.Application:
        """Build the aiohttp application with every route."""
        app = web.Application()
        app.add_routes(
            [
                web.get("/lake/v0/health", _handle_health),
                web.get("/lake/v0/progress", self._handle_progress),
                web.get("/metrics", _handle_metrics),
            ]
        )
        return app

    async def start(self) -> None:
        """Start the API server in the background."""
        if not self.config.enabled:
            logger.info("API server is disabled")
            return

        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()

        logger.info("API server listening on %s:%d", self.config.host, self.config.port)

    async def run(self) -> None:
        """
        Run the API server until shutdown.

        This method blocks until stop() is called.
        """
        await self.start()

        # Keep running until stopped
        while self._runner is not None:
            await asyncio.sleep(1)

    def stop(self) -> None:
        """Request graceful shutdown."""
        if self._runner is not None:
            asyncio.create_task(self._async_stop())

    async def _async_stop(self) -> None:
        """Gracefully stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("API server stopped")

    async def _handle_progress(self, _request: web.Request) -> web.Response:
        """
        Handle streamer progress endpoint.

        Response format:
        {
            "state": "<state name>",
            "last_accepted_height": <height or null>,
            "last_accepted_hash": "<hash>" or null,
            "blocks_delivered": <count>,
            "chain_resets": <count>,
            "in_flight": <count>
        }
        """
        progress = self.progress
        if progress is None:
            raise web.HTTPServiceUnavailable(reason="Streamer not started")

        return web.json_response(
            {
                "state": progress.state.name,
                "last_accepted_height": progress.last_accepted_height,
                "last_accepted_hash": progress.last_accepted_hash,
                "blocks_delivered": progress.blocks_delivered,
                "chain_resets": progress.chain_resets,
                "in_flight": progress.in_flight,
            }
        )
