#!/usr/bin/env python

# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

# -*- coding: utf-8 -*-

"""
Store client entry module.
Supports two startup modes:
1. Run directly: python -m store_client.main
2. Use uvicorn: uvicorn store_client.main:create_app --factory --port 8081
"""

import sys
from typing import Optional

import httpx
from fastapi import FastAPI

from shared.logger import setup_logger
from shared.telemetry import Telemetry, create_telemetry, get_telemetry_config
from shared.web import InstrumentedClient, create_service_app, run_service
from store_client.config import SERVICE_NAME, StoreClientSettings
from store_client.routes import StorefrontRoutes, register_routes

logger = setup_logger(__name__)


def create_app(
    telemetry: Optional[Telemetry] = None,
    settings: Optional[StoreClientSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the store client application.

    Args:
        telemetry: Telemetry context, created from the environment if omitted
        settings: Service settings, read from the environment if omitted
        transport: httpx transport for reaching the store API (tests route it
                   to an in-process app)
    """
    settings = settings or StoreClientSettings()
    if telemetry is None:
        telemetry = create_telemetry(
            get_telemetry_config(SERVICE_NAME), install_globals=True
        )

    api_client = InstrumentedClient(
        telemetry, settings.api_service_url, transport=transport
    )
    app = create_service_app(
        telemetry, title="Store Client", shutdown_callbacks=[api_client.aclose]
    )
    app.state.api_client = api_client
    register_routes(app, StorefrontRoutes(api_client), telemetry)
    return app


def main() -> int:
    settings = StoreClientSettings()
    return run_service(create_app(settings=settings), settings.host, settings.port, logger)


if __name__ == "__main__":
    sys.exit(main())
