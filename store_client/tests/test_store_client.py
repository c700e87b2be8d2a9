# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the store client service, including the full client -> api chain.
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from opentelemetry.trace import SpanKind, StatusCode

from shared.telemetry.context import SpanNames
from store_api.config import StoreApiSettings
from store_api.main import create_app as create_api_app
from store_client.config import StoreClientSettings
from store_client.main import create_app
from store_client.routes import render_products_page

API_URL = "http://store-api"


def _settings():
    return StoreClientSettings(api_service_url=API_URL)


def _mock_api(status_code=200, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return httpx.MockTransport(handler)


def _requests(telemetry, route, status_code):
    return telemetry.registry.get_sample_value(
        "workshop_http_requests_total",
        {"route": route, "method": "GET", "status_code": str(status_code)},
    )


@pytest.mark.unit
class TestLandingPage:
    """Test suite for GET /."""

    def test_welcome(self, client_telemetry, client_spans):
        app = create_app(telemetry=client_telemetry, settings=_settings(), transport=_mock_api())

        response = TestClient(app).get("/")

        assert response.status_code == 200
        assert response.text == "Welcome to the kitchen store!\n"
        assert _requests(client_telemetry, "/", 200) == 1.0
        assert [s.name for s in client_spans.get_finished_spans()] == [
            SpanNames.CLIENT_LANDING_PAGE
        ]


@pytest.mark.unit
class TestProductsPage:
    """Test suite for GET /products against a mocked API."""

    def test_renders_products(self, client_telemetry):
        transport = _mock_api(json=[{"id": 1, "name": "Mug", "price": 1099}])
        app = create_app(telemetry=client_telemetry, settings=_settings(), transport=transport)

        response = TestClient(app).get("/products")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.text == (
            "<html><body><h1>Our Products</h1><ul>"
            "<li><strong>1</strong>: Mug ($1099)</li>"
            "</ul></body></html>"
        )

    def test_upstream_status_becomes_bad_gateway(self, client_telemetry, client_spans):
        app = create_app(
            telemetry=client_telemetry, settings=_settings(), transport=_mock_api(503)
        )

        response = TestClient(app).get("/products")

        assert response.status_code == 502
        assert response.json() == {"detail": "API service returned non-200 status code: 503"}
        assert _requests(client_telemetry, "/products", 502) == 1.0

        by_name = {s.name: s for s in client_spans.get_finished_spans()}
        assert by_name["HTTP GET /products"].status.status_code is StatusCode.ERROR
        assert by_name[SpanNames.CLIENT_PRODUCTS_PAGE].status.status_code is StatusCode.ERROR
        assert client_telemetry.tracker.open_span_count == 0

    def test_connection_error_becomes_internal_error(self, client_telemetry):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        app = create_app(
            telemetry=client_telemetry,
            settings=_settings(),
            transport=httpx.MockTransport(refuse),
        )

        response = TestClient(app).get("/products")

        assert response.status_code == 500
        assert response.json() == {"detail": "Error fetching products: connection refused"}
        assert _requests(client_telemetry, "/products", 500) == 1.0

    def test_invalid_json_becomes_internal_error(self, client_telemetry):
        app = create_app(
            telemetry=client_telemetry,
            settings=_settings(),
            transport=_mock_api(content=b"not json"),
        )

        response = TestClient(app).get("/products")

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Error decoding products")

    def test_render_escapes_markup(self):
        page = render_products_page([{"id": 1, "name": "<b>Mug</b>", "price": 1}])

        assert "<b>Mug</b>" not in page
        assert "&lt;b&gt;Mug&lt;/b&gt;" in page

    def test_render_escapes_price(self):
        page = render_products_page([{"id": 1, "name": "Mug", "price": "<script>x</script>"}])

        assert "<script>" not in page
        assert "($&lt;script&gt;x&lt;/script&gt;)" in page

    def test_shutdown_closes_api_client(self, client_telemetry):
        app = create_app(telemetry=client_telemetry, settings=_settings(), transport=_mock_api())

        with TestClient(app):
            pass

        assert app.state.api_client._client.is_closed
        assert client_telemetry.is_shutdown


@pytest.mark.integration
class TestClientApiChain:
    """A request to the client's /products produces one trace across both services."""

    @pytest.mark.asyncio
    async def test_single_trace_across_services(
        self, client_telemetry, client_spans, api_telemetry, api_spans
    ):
        api_app = create_api_app(
            telemetry=api_telemetry, settings=StoreApiSettings(bottleneck_iterations=5_000)
        )
        client_app = create_app(
            telemetry=client_telemetry,
            settings=_settings(),
            transport=httpx.ASGITransport(app=api_app),
        )

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=client_app), base_url="http://store-client"
        ) as browser:
            response = await browser.get("/products")

        assert response.status_code == 200
        assert "<strong>10</strong>: Glass ($1199)" in response.text

        client_by_name = {s.name: s for s in client_spans.get_finished_spans()}
        api_by_name = {s.name: s for s in api_spans.get_finished_spans()}

        page = client_by_name[SpanNames.CLIENT_PRODUCTS_PAGE]
        hop = client_by_name["HTTP GET /products"]
        api_handler = api_by_name[SpanNames.PRODUCTS_HANDLER]
        work = api_by_name[SpanNames.SIMULATE_CPU_WORK]

        trace_ids = {s.context.trace_id for s in (page, hop, api_handler, work)}
        assert len(trace_ids) == 1
        span_ids = {s.context.span_id for s in (page, hop, api_handler, work)}
        assert len(span_ids) == 4

        assert page.parent is None
        assert hop.kind is SpanKind.CLIENT
        assert hop.parent.span_id == page.context.span_id
        assert api_handler.parent.span_id == hop.context.span_id
        assert work.parent.span_id == api_handler.context.span_id

        assert api_handler.resource.attributes["service.name"] == "store-api"
        assert page.resource.attributes["service.name"] == "store-client"

        assert _requests(client_telemetry, "/products", 200) == 1.0
        assert _requests(api_telemetry, "/products", 200) == 1.0
        assert client_telemetry.tracker.open_span_count == 0
        assert api_telemetry.tracker.open_span_count == 0
