# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Inbound request instrumentation.

InstrumentedHandler wraps a plain request handler so that every request:
- continues the caller's trace when a valid traceparent header is present,
  or starts a new trace otherwise
- runs inside a server span named after the route
- is counted and timed in the service's metrics registry, failures included

Usage Example:
    ```python
    app = create_service_app(telemetry, "store-api")
    register_route(app, "/products", routes.products, telemetry)
    ```
"""

import inspect
import logging
import time
from typing import Any, Awaitable, Optional, Protocol, Union

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from opentelemetry.trace import SpanKind
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from shared.telemetry.context import (SpanAttributes, SpanHandle, SpanStatus,
                                      extract_trace_context)
from shared.web.errors import error_message, error_status_code

logger = logging.getLogger(__name__)


class Handler(Protocol):
    """
    A request handler.

    It may be sync or async. Sync handlers run in the thread pool so that
    CPU-bound work does not block the event loop. A return value that is not a
    Response is serialized as JSON.
    """

    def __call__(self, request: Request) -> Union[Any, Awaitable[Any]]: ...


def current_span_handle(request: Request) -> Optional[SpanHandle]:
    """Server span of the request being handled, if it is instrumented."""
    return getattr(request.state, "span_handle", None)


class InstrumentedHandler:
    """Handler wrapper adding a server span and request metrics."""

    def __init__(
        self,
        handler: Handler,
        route: str,
        telemetry,
        method: str = "GET",
        span_name: Optional[str] = None,
    ):
        self.handler = handler
        self.route = route
        self.method = method.upper()
        self.span_name = span_name or route
        self.telemetry = telemetry
        self._is_async = inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
            getattr(handler, "__call__", None)
        )

    async def __call__(self, request: Request) -> Response:
        return await self.handle(request)

    async def _invoke(self, request: Request) -> Response:
        if self._is_async:
            result = await self.handler(request)
        else:
            result = await run_in_threadpool(self.handler, request)

        if isinstance(result, Response):
            return result
        return JSONResponse(result)

    async def handle(self, request: Request) -> Response:
        tracker = self.telemetry.tracker
        registry = self.telemetry.registry

        started = time.perf_counter()
        inbound = extract_trace_context(request.headers)

        with tracker.span(
            self.span_name,
            parent=inbound,
            root=inbound is None,
            kind=SpanKind.SERVER,
            attributes={
                SpanAttributes.HTTP_METHOD: self.method,
                SpanAttributes.HTTP_ROUTE: self.route,
                SpanAttributes.HTTP_TARGET: request.url.path,
            },
        ) as handle:
            request.state.span_handle = handle

            try:
                response = await self._invoke(request)
            except Exception as e:
                status_code = error_status_code(e)
                if status_code >= 500:
                    logger.error(f"{self.method} {self.route} failed: {e}", exc_info=True)
                else:
                    logger.warning(f"{self.method} {self.route} rejected: {e}")
                tracker.record_error(handle, e)
                response = JSONResponse({"detail": error_message(e)}, status_code=status_code)

            if response.status_code >= 500 and handle.status is SpanStatus.OK:
                tracker.mark_error(handle, f"HTTP {response.status_code}")

            elapsed = time.perf_counter() - started
            tracker.set_attributes(
                handle,
                {
                    SpanAttributes.HTTP_STATUS_CODE: response.status_code,
                    SpanAttributes.SERVER_DURATION_MS: round(elapsed * 1000, 3),
                },
            )

        registry.increment_request(self.route, self.method, response.status_code)
        registry.observe_latency(self.route, elapsed)
        return response


def register_route(
    app: FastAPI,
    route: str,
    handler: Handler,
    telemetry,
    method: str = "GET",
    span_name: Optional[str] = None,
) -> InstrumentedHandler:
    """Wrap handler and mount it on app at route."""
    instrumented = InstrumentedHandler(
        handler, route, telemetry, method=method, span_name=span_name
    )
    app.add_api_route(
        route,
        instrumented.handle,
        methods=[instrumented.method],
        response_model=None,
        name=instrumented.span_name,
    )
    return instrumented
