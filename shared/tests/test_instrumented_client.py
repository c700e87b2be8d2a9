# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the outbound instrumented client.
"""

import httpx
import pytest
from opentelemetry.trace import SpanKind, StatusCode

from shared.telemetry.context import SpanAttributes, extract_trace_context
from shared.web import InstrumentedClient


class RecordingTransport(httpx.MockTransport):
    """MockTransport remembering every request it served."""

    def __init__(self, status_code=200, json=None, error=None):
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, json=json if json is not None else [])

        super().__init__(handler)


@pytest.mark.unit
class TestClientConstruction:
    """Test suite for timeout handling."""

    def test_default_timeout_from_config(self, telemetry):
        client = InstrumentedClient(telemetry, "http://store-api:8080")

        assert client.timeout == telemetry.config.outbound_timeout
        assert client.base_url.startswith("http://store-api:8080")

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout_rejected(self, telemetry, timeout):
        with pytest.raises(ValueError):
            InstrumentedClient(telemetry, "http://store-api:8080", timeout=timeout)

    def test_unbounded_timeout_object_rejected(self, telemetry):
        with pytest.raises(ValueError):
            InstrumentedClient(
                telemetry, "http://store-api:8080", timeout=httpx.Timeout(5.0, read=None)
            )


@pytest.mark.unit
class TestOutboundRequests:
    """Test suite for InstrumentedClient.request."""

    @pytest.mark.asyncio
    async def test_injects_hop_context(self, telemetry, span_exporter):
        transport = RecordingTransport(json=[{"id": 1}])

        async with InstrumentedClient(telemetry, "http://store-api", transport=transport) as client:
            with telemetry.tracker.span("caller") as caller:
                response = await client.get("/products", headers={"accept": "application/json"})

        assert response.json() == [{"id": 1}]
        sent = transport.requests[0]
        assert sent.headers["accept"] == "application/json"
        propagated = extract_trace_context(sent.headers)

        by_name = {s.name: s for s in span_exporter.get_finished_spans()}
        hop = by_name["HTTP GET /products"]
        assert hop.kind is SpanKind.CLIENT
        assert hop.parent.span_id == caller.span_id
        assert propagated.trace_id == caller.trace_id
        assert propagated.span_id == hop.context.span_id
        assert hop.attributes[SpanAttributes.HTTP_STATUS_CODE] == 200
        assert hop.attributes[SpanAttributes.HTTP_URL] == "http://store-api/products"
        assert hop.attributes[SpanAttributes.HTTP_CLIENT_DURATION_MS] >= 0
        assert telemetry.tracker.open_span_count == 0

    @pytest.mark.asyncio
    async def test_without_caller_span_starts_trace(self, telemetry, span_exporter):
        transport = RecordingTransport()

        async with InstrumentedClient(telemetry, "http://store-api", transport=transport) as client:
            await client.request("get", "/employees")

        hop = span_exporter.get_finished_spans()[0]
        assert hop.name == "HTTP GET /employees"
        assert hop.parent is None
        assert "traceparent" in transport.requests[0].headers

    @pytest.mark.asyncio
    async def test_non_success_status_surfaced(self, telemetry, span_exporter):
        transport = RecordingTransport(status_code=503)

        async with InstrumentedClient(telemetry, "http://store-api", transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.get("/products")

        assert exc_info.value.response.status_code == 503
        hop = span_exporter.get_finished_spans()[0]
        assert hop.status.status_code is StatusCode.ERROR
        assert hop.attributes[SpanAttributes.HTTP_STATUS_CODE] == 503
        assert telemetry.tracker.open_span_count == 0

    @pytest.mark.asyncio
    async def test_connection_error_surfaced_unchanged(self, telemetry, span_exporter):
        error = httpx.ConnectError("connection refused")
        transport = RecordingTransport(error=error)

        async with InstrumentedClient(telemetry, "http://store-api", transport=transport) as client:
            with pytest.raises(httpx.ConnectError) as exc_info:
                await client.get("/products")

        assert exc_info.value is error
        hop = span_exporter.get_finished_spans()[0]
        assert hop.status.status_code is StatusCode.ERROR
        assert hop.attributes[SpanAttributes.ERROR_TYPE] == "ConnectError"
        assert SpanAttributes.HTTP_CLIENT_DURATION_MS in hop.attributes
        assert telemetry.tracker.open_span_count == 0


@pytest.mark.unit
class TestPerRequestTimeout:
    """Test suite for timeouts passed to a single request."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "timeout", [None, 0, -2.0, httpx.Timeout(None), httpx.Timeout(5.0, pool=None)]
    )
    async def test_unbounded_timeout_rejected(self, telemetry, span_exporter, timeout):
        transport = RecordingTransport()

        async with InstrumentedClient(telemetry, "http://store-api", transport=transport) as client:
            with pytest.raises(ValueError):
                await client.get("/products", timeout=timeout)

        assert transport.requests == []
        assert span_exporter.get_finished_spans() == ()

    @pytest.mark.asyncio
    async def test_per_request_timeout_forwarded(self, telemetry):
        transport = RecordingTransport()

        async with InstrumentedClient(telemetry, "http://store-api", transport=transport) as client:
            await client.get("/products", timeout=1.5)

        assert transport.requests[0].extensions["timeout"]["read"] == 1.5

    @pytest.mark.asyncio
    async def test_client_timeout_used_by_default(self, telemetry):
        transport = RecordingTransport()

        async with InstrumentedClient(
            telemetry, "http://store-api", timeout=4.0, transport=transport
        ) as client:
            await client.get("/products")

        assert transport.requests[0].extensions["timeout"] == {
            "connect": 4.0, "read": 4.0, "write": 4.0, "pool": 4.0,
        }
