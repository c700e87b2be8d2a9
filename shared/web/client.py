# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Outbound HTTP client that continues the caller's trace.

Each request opens a client span as a child of the active span, injects that
span's context as a traceparent header and records the call duration.
Transport errors and non-success statuses are recorded on the span and raised
to the caller unchanged.
"""

import logging
import time
from typing import Mapping, Optional, Union

import httpx
from opentelemetry.trace import SpanKind

from shared.telemetry.context import (SpanAttributes, SpanNames,
                                      inject_trace_context)

logger = logging.getLogger(__name__)

TimeoutTypes = Union[float, httpx.Timeout]


def _check_timeout(timeout: Optional[TimeoutTypes]) -> TimeoutTypes:
    """Reject timeouts that would leave an outbound call unbounded."""
    if isinstance(timeout, httpx.Timeout):
        limits = (timeout.connect, timeout.read, timeout.write, timeout.pool)
    else:
        limits = (timeout,)
    for limit in limits:
        if limit is None or limit <= 0:
            raise ValueError(f"timeout must be positive: {timeout!r}")
    return timeout


class InstrumentedClient:
    """httpx.AsyncClient wrapper bound to one downstream base URL."""

    def __init__(
        self,
        telemetry,
        base_url: str,
        timeout: Optional[TimeoutTypes] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if timeout is None:
            timeout = telemetry.config.outbound_timeout

        self.telemetry = telemetry
        self.timeout = _check_timeout(timeout)
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def request(
        self,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> httpx.Response:
        """
        Send a request inside a client span.

        A per-call timeout may be passed, but it must be bounded.

        Raises:
            ValueError: The timeout is None or not positive
            httpx.HTTPStatusError: Downstream answered with a 4xx or 5xx status
            httpx.HTTPError: Connection failure or timeout
        """
        timeout = _check_timeout(kwargs.pop("timeout", self.timeout))
        method = method.upper()
        tracker = self.telemetry.tracker

        with tracker.span(
            SpanNames.HTTP_CLIENT_REQUEST.format(method=method, path=path),
            kind=SpanKind.CLIENT,
            attributes={
                SpanAttributes.HTTP_METHOD: method,
                SpanAttributes.HTTP_URL: str(self._client.base_url.join(path)),
            },
        ) as handle:
            outgoing = dict(headers or {})
            if handle.context is not None:
                inject_trace_context(handle.context, outgoing)

            started = time.perf_counter()
            try:
                response = await self._client.request(
                    method, path, headers=outgoing, timeout=timeout, **kwargs
                )
            finally:
                tracker.set_attribute(
                    handle,
                    SpanAttributes.HTTP_CLIENT_DURATION_MS,
                    round((time.perf_counter() - started) * 1000, 3),
                )

            tracker.set_attribute(handle, SpanAttributes.HTTP_STATUS_CODE, response.status_code)
            logger.debug(f"{method} {response.url} -> {response.status_code}")
            response.raise_for_status()
            return response

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "InstrumentedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
