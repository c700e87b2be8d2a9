# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import \
    InMemorySpanExporter

from shared.telemetry import TelemetryConfig, create_telemetry
from store_api.config import StoreApiSettings
from store_api.main import create_app


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def telemetry(span_exporter):
    config = TelemetryConfig(service_name="store-api", traces_exporter="none")
    instance = create_telemetry(
        config, span_exporter=span_exporter, synchronous_export=True, start_profiler=False
    )
    yield instance
    instance.shutdown(grace_seconds=1.0)


@pytest.fixture
def settings():
    # Small loop keeps the suite fast while still exercising the bottleneck
    return StoreApiSettings(bottleneck_iterations=10_000)


@pytest.fixture
def client(telemetry, settings):
    return TestClient(create_app(telemetry=telemetry, settings=settings))
