# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import \
    InMemorySpanExporter

from shared.telemetry import (TelemetryConfig, create_telemetry,
                              reset_telemetry_config)


@pytest.fixture
def span_exporter():
    """In-memory exporter collecting every finished span."""
    return InMemorySpanExporter()


@pytest.fixture
def telemetry(span_exporter):
    """Isolated telemetry context exporting spans synchronously to memory."""
    config = TelemetryConfig(service_name="test-service", traces_exporter="none")
    instance = create_telemetry(
        config,
        span_exporter=span_exporter,
        synchronous_export=True,
        start_profiler=False,
    )
    yield instance
    instance.shutdown(grace_seconds=1.0)


@pytest.fixture
def clean_config():
    """Drop the cached TelemetryConfig before and after the test."""
    reset_telemetry_config()
    yield
    reset_telemetry_config()
