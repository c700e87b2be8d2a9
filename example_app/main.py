#!/usr/bin/env python

# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

# -*- coding: utf-8 -*-

"""
Example app entry module.
Supports two startup modes:
1. Run directly: python -m example_app.main
2. Use uvicorn: uvicorn example_app.main:create_app --factory --port 8080
"""

import random
import sys
from typing import Optional

from fastapi import FastAPI

from example_app.config import SERVICE_NAME, ExampleAppSettings
from example_app.routes import ExampleRoutes, register_routes
from shared.logger import setup_logger
from shared.telemetry import Telemetry, create_telemetry, get_telemetry_config
from shared.web import create_service_app, run_service

logger = setup_logger(__name__)


def create_app(
    telemetry: Optional[Telemetry] = None,
    settings: Optional[ExampleAppSettings] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """
    Build the example application.

    Args:
        telemetry: Telemetry context, created from the environment if omitted
        settings: Service settings, read from the environment if omitted
        rng: Random source of the simulated work duration
    """
    settings = settings or ExampleAppSettings()
    if telemetry is None:
        telemetry = create_telemetry(
            get_telemetry_config(SERVICE_NAME), install_globals=True
        )

    app = create_service_app(telemetry, title="Example App")
    register_routes(app, ExampleRoutes(telemetry, settings.max_work_ms, rng=rng), telemetry)
    return app


def main() -> int:
    settings = ExampleAppSettings()
    return run_service(create_app(settings=settings), settings.host, settings.port, logger)


if __name__ == "__main__":
    sys.exit(main())
