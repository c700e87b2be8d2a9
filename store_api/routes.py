# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Store API routes.

/products is deliberately slow: it burns CPU before answering, so the work
shows up as a wide span in traces and a hot frame in profiles.
"""

import logging
from typing import Dict, List

from fastapi import FastAPI
from starlette.requests import Request

from shared.telemetry import simulate_bottleneck
from shared.telemetry.context import SpanAttributes, SpanNames
from shared.web import current_span_handle, register_route
from store_api.data import EMPLOYEES, PRODUCTS

logger = logging.getLogger(__name__)


class StoreRoutes:
    """Business handlers of the store API."""

    def __init__(self, telemetry, bottleneck_iterations: int):
        self.telemetry = telemetry
        self.bottleneck_iterations = bottleneck_iterations

    # Sync on purpose: runs in the thread pool so the event loop stays free
    def products(self, request: Request) -> List[Dict]:
        handle = current_span_handle(request)
        if handle is not None:
            self.telemetry.tracker.set_attribute(
                handle, SpanAttributes.BOTTLENECK_SIMULATED, True
            )

        simulate_bottleneck(
            self.telemetry.tracker,
            self.bottleneck_iterations,
            profiler=self.telemetry.profiler,
        )

        logger.info(f"Returning {len(PRODUCTS)} products")
        return PRODUCTS

    async def employees(self, request: Request) -> List[Dict]:
        return EMPLOYEES


def register_routes(app: FastAPI, routes: StoreRoutes, telemetry) -> None:
    register_route(
        app, "/products", routes.products, telemetry, span_name=SpanNames.PRODUCTS_HANDLER
    )
    register_route(
        app, "/employees", routes.employees, telemetry, span_name=SpanNames.EMPLOYEES_HANDLER
    )
