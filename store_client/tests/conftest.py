# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import \
    InMemorySpanExporter

from shared.telemetry import TelemetryConfig, create_telemetry


def _build_telemetry(service_name, exporter):
    config = TelemetryConfig(service_name=service_name, traces_exporter="none")
    return create_telemetry(
        config, span_exporter=exporter, synchronous_export=True, start_profiler=False
    )


@pytest.fixture
def client_spans():
    return InMemorySpanExporter()


@pytest.fixture
def api_spans():
    return InMemorySpanExporter()


@pytest.fixture
def client_telemetry(client_spans):
    instance = _build_telemetry("store-client", client_spans)
    yield instance
    instance.shutdown(grace_seconds=1.0)


@pytest.fixture
def api_telemetry(api_spans):
    instance = _build_telemetry("store-api", api_spans)
    yield instance
    instance.shutdown(grace_seconds=1.0)
