# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import \
    InMemorySpanExporter

from example_app.config import ExampleAppSettings
from example_app.main import create_app
from shared.telemetry import TelemetryConfig, create_telemetry


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def telemetry(span_exporter):
    config = TelemetryConfig(service_name="example-app", traces_exporter="none")
    instance = create_telemetry(
        config, span_exporter=span_exporter, synchronous_export=True, start_profiler=False
    )
    yield instance
    instance.shutdown(grace_seconds=1.0)


@pytest.fixture
def rng():
    """Random source pinned to a 7 ms workload."""
    source = Mock()
    source.randrange.return_value = 7
    return source


@pytest.fixture
def client(telemetry, rng):
    app = create_app(telemetry=telemetry, settings=ExampleAppSettings(max_work_ms=50), rng=rng)
    return TestClient(app)
