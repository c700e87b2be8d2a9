# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Store client routes.

The products page is rendered from the store API, reached only through the
instrumented client so the API's spans join this service's trace.
"""

import html
import json
import logging

import httpx
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.requests import Request

from shared.telemetry.context import SpanNames
from shared.web import InstrumentedClient, ServiceError, UpstreamError, register_route

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the kitchen store!\n"


def render_products_page(products) -> str:
    items = "".join(
        f"<li><strong>{html.escape(str(p.get('id', '')))}</strong>: "
        f"{html.escape(str(p.get('name', '')))} (${html.escape(str(p.get('price', 0)))})</li>"
        for p in products
    )
    return f"<html><body><h1>Our Products</h1><ul>{items}</ul></body></html>"


class StorefrontRoutes:
    """Business handlers of the store client."""

    def __init__(self, api_client: InstrumentedClient):
        self.api_client = api_client

    async def landing_page(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse(WELCOME_MESSAGE)

    async def products_page(self, request: Request) -> HTMLResponse:
        try:
            response = await self.api_client.get("/products")
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"API service returned non-200 status code: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ServiceError(f"Error fetching products: {e}") from e

        try:
            products = response.json()
        except json.JSONDecodeError as e:
            raise ServiceError(f"Error decoding products: {e}") from e

        logger.info(f"Rendering {len(products)} products")
        return HTMLResponse(render_products_page(products))


def register_routes(app: FastAPI, routes: StorefrontRoutes, telemetry) -> None:
    register_route(
        app, "/", routes.landing_page, telemetry, span_name=SpanNames.CLIENT_LANDING_PAGE
    )
    register_route(
        app, "/products", routes.products_page, telemetry, span_name=SpanNames.CLIENT_PRODUCTS_PAGE
    )
