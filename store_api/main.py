#!/usr/bin/env python

# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

# -*- coding: utf-8 -*-

"""
Store API entry module.
Supports two startup modes:
1. Run directly: python -m store_api.main
2. Use uvicorn: uvicorn store_api.main:create_app --factory --port 8080
"""

import sys
from typing import Optional

from fastapi import FastAPI

from shared.logger import setup_logger
from shared.telemetry import Telemetry, create_telemetry, get_telemetry_config
from shared.web import create_service_app, run_service
from store_api.config import SERVICE_NAME, StoreApiSettings
from store_api.routes import StoreRoutes, register_routes

logger = setup_logger(__name__)


def create_app(
    telemetry: Optional[Telemetry] = None,
    settings: Optional[StoreApiSettings] = None,
) -> FastAPI:
    """
    Build the store API application.

    Args:
        telemetry: Telemetry context, created from the environment if omitted
        settings: Service settings, read from the environment if omitted
    """
    settings = settings or StoreApiSettings()
    if telemetry is None:
        telemetry = create_telemetry(
            get_telemetry_config(SERVICE_NAME), install_globals=True
        )

    app = create_service_app(telemetry, title="Store API")
    register_routes(app, StoreRoutes(telemetry, settings.bottleneck_iterations), telemetry)
    return app


def main() -> int:
    settings = StoreApiSettings()
    return run_service(create_app(settings=settings), settings.host, settings.port, logger)


if __name__ == "__main__":
    sys.exit(main())
