# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Example app routes.

"/" sleeps for a random amount of time and reports it; "/error" always fails.
"""

import asyncio
import logging
import random
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.requests import Request

from shared.telemetry.context import SpanAttributes, SpanNames
from shared.web import ServiceError, current_span_handle, register_route

logger = logging.getLogger(__name__)

WORK_LEVEL_GAUGE = "work_level"
ERROR_MESSAGE = "An intentional error occurred."


class ExampleRoutes:
    """Business handlers of the example app."""

    def __init__(self, telemetry, max_work_ms: int, rng: Optional[random.Random] = None):
        self.telemetry = telemetry
        self.max_work_ms = max_work_ms
        self.rng = rng or random.Random()

    async def root(self, request: Request) -> PlainTextResponse:
        logger.info(f"Received request on root path {request.url.path}")

        work_ms = self.rng.randrange(self.max_work_ms)
        await asyncio.sleep(work_ms / 1000)

        self.telemetry.registry.set_gauge(WORK_LEVEL_GAUGE, work_ms)
        handle = current_span_handle(request)
        if handle is not None:
            self.telemetry.tracker.set_attribute(
                handle, SpanAttributes.WORK_DURATION_MS, work_ms
            )

        logger.info(f"Request handled successfully in {work_ms} ms")
        return PlainTextResponse(f"Hello, Observability! Work completed in {work_ms} ms.\n")

    async def error(self, request: Request) -> PlainTextResponse:
        raise ServiceError(ERROR_MESSAGE)


def register_routes(app: FastAPI, routes: ExampleRoutes, telemetry) -> None:
    register_route(app, "/", routes.root, telemetry, span_name=SpanNames.ROOT_HANDLER)
    register_route(app, "/error", routes.error, telemetry, span_name=SpanNames.ERROR_HANDLER)
