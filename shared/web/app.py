# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
FastAPI application factory shared by the services.
"""

import inspect
import logging
from contextlib import asynccontextmanager
from typing import Callable, List, Optional

import uvicorn
from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

logger = logging.getLogger(__name__)


def create_service_app(
    telemetry,
    title: str,
    shutdown_callbacks: Optional[List[Callable]] = None,
) -> FastAPI:
    """
    Create the service application.

    The app exposes GET /metrics in Prometheus text format. On shutdown it
    runs shutdown_callbacks (sync or async), then flushes telemetry within
    the configured grace period.

    Args:
        telemetry: Telemetry context of the service
        title: Application title
        shutdown_callbacks: Callables run before telemetry is flushed

    Returns:
        FastAPI: The application
    """
    callbacks = shutdown_callbacks if shutdown_callbacks is not None else []

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Service '{telemetry.service_name}' starting")

        yield

        logger.info(f"Service '{telemetry.service_name}' shutting down")
        for callback in callbacks:
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Shutdown callback {callback!r} failed: {e}")

        flushed = await run_in_threadpool(telemetry.shutdown)
        if not flushed:
            logger.warning("Some telemetry was not exported before shutdown")

    app = FastAPI(title=title, lifespan=lifespan)
    app.state.telemetry = telemetry
    app.state.shutdown_callbacks = callbacks

    async def metrics() -> Response:
        body, content_type = telemetry.registry.export()
        return Response(content=body, media_type=content_type)

    app.add_api_route(
        "/metrics", metrics, methods=["GET"], include_in_schema=False, response_model=None
    )
    return app


def run_service(app: FastAPI, host: str, port: int, log: logging.Logger) -> int:
    """Serve app until interrupted. Returns the process exit code."""
    try:
        log.info(f"Starting server on {host}:{port}...")
        uvicorn.run(app, host=host, port=port)
    except Exception as e:
        log.error(f"Service startup failed: {e}")
        return 1
    return 0
