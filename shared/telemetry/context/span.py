# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Span lifecycle tracking on top of OpenTelemetry.

SpanTracker opens spans bound to a logical operation, records attributes and
errors on them, and closes them exactly once. Each span moves through
``created -> running -> ended``; operations on an ended span are ignored so
that telemetry never breaks the request path.

Usage Example:
    ```python
    tracker = telemetry.tracker

    with tracker.span("products-handler", parent=inbound_ctx) as handle:
        tracker.set_attribute(handle, "bottleneck_simulated", True)
        ...
    ```
"""

import enum
import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from shared.telemetry.context.attributes import SpanAttributes
from shared.telemetry.context.propagation import TraceContext

logger = logging.getLogger(__name__)

AttributeValue = Any


class SpanState(str, enum.Enum):
    CREATED = "created"
    RUNNING = "running"
    ENDED = "ended"


class SpanStatus(str, enum.Enum):
    OK = "ok"
    ERROR = "error"


def _coerce_attribute(value: Any) -> Optional[AttributeValue]:
    """Convert value to a scalar attribute, string if not a primitive type."""
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class SpanHandle:
    """
    Exclusive handle on one open span.

    A handle belongs to the call stack that created it and must not be shared
    with another concurrently executing request.
    """

    def __init__(self, name: str, parent_span_id: Optional[int]):
        self.name = name
        self.parent_span_id = parent_span_id
        self.state = SpanState.CREATED
        self.status = SpanStatus.OK
        self.status_reason: Optional[str] = None
        self.span: Optional[Span] = None

    @property
    def context(self) -> Optional[TraceContext]:
        if self.span is None:
            return None
        return TraceContext.from_span_context(self.span.get_span_context())

    @property
    def trace_id(self) -> Optional[int]:
        ctx = self.context
        return ctx.trace_id if ctx else None

    @property
    def span_id(self) -> Optional[int]:
        ctx = self.context
        return ctx.span_id if ctx else None

    @property
    def start_time(self) -> Optional[int]:
        return getattr(self.span, "start_time", None)

    @property
    def end_time(self) -> Optional[int]:
        return getattr(self.span, "end_time", None)

    @property
    def is_running(self) -> bool:
        return self.state is SpanState.RUNNING

    def status_tuple(self) -> Tuple[str, Optional[str]]:
        return self.status.value, self.status_reason

    def __repr__(self) -> str:
        return (
            f"SpanHandle(name={self.name!r}, state={self.state.value}, "
            f"status={self.status.value})"
        )


class SpanTracker:
    """
    Creates, annotates and closes spans for one service.

    The tracker is bound to the service's own tracer, so spans carry that
    service's resource attributes.
    """

    def __init__(self, tracer: Tracer):
        self._tracer = tracer
        self._lock = threading.Lock()
        self._open_spans = 0
        self._started_total = 0
        self._ended_total = 0

    @property
    def open_span_count(self) -> int:
        with self._lock:
            return self._open_spans

    @property
    def started_total(self) -> int:
        with self._lock:
            return self._started_total

    @property
    def ended_total(self) -> int:
        with self._lock:
            return self._ended_total

    def start(
        self,
        name: str,
        parent: Optional[TraceContext] = None,
        root: bool = False,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> SpanHandle:
        """
        Open a new span.

        Args:
            name: Span name
            parent: Remote parent context. The trace_id is inherited from it.
            root: Ignore the caller's active span and start a new trace
            kind: OpenTelemetry span kind
            attributes: Initial attributes

        Returns:
            SpanHandle: Handle in the running state
        """
        if parent is not None:
            otel_context = parent.to_otel_context()
            parent_span_id = parent.span_id
        elif root:
            otel_context = Context()
            parent_span_id = None
        else:
            otel_context = None
            active = trace.get_current_span().get_span_context()
            parent_span_id = active.span_id if active.is_valid else None

        handle = SpanHandle(name, parent_span_id)

        initial = {}
        for key, value in (attributes or {}).items():
            coerced = _coerce_attribute(value)
            if coerced is not None:
                initial[key] = coerced

        handle.span = self._tracer.start_span(
            name, context=otel_context, kind=kind, attributes=initial
        )
        handle.state = SpanState.RUNNING

        with self._lock:
            self._open_spans += 1
            self._started_total += 1

        return handle

    def set_attribute(self, handle: SpanHandle, key: str, value: Any) -> None:
        """Set an attribute while the span is running. No-op once ended."""
        if not handle.is_running:
            logger.debug(f"Ignoring attribute {key} on {handle.state.value} span {handle.name}")
            return

        coerced = _coerce_attribute(value)
        if coerced is None:
            return

        try:
            handle.span.set_attribute(key, coerced)
        except Exception as e:
            logger.debug(f"Failed to set span attribute {key}={value}: {e}")

    def set_attributes(self, handle: SpanHandle, attributes: Dict[str, Any]) -> None:
        for key, value in attributes.items():
            self.set_attribute(handle, key, value)

    def record_error(
        self, handle: SpanHandle, error: BaseException, description: Optional[str] = None
    ) -> None:
        """
        Mark the span as errored without ending it.

        Args:
            handle: Span handle
            error: The exception that occurred
            description: Optional status description, defaults to str(error)
        """
        if not handle.is_running:
            logger.debug(f"Ignoring error on {handle.state.value} span {handle.name}")
            return

        reason = description or str(error) or type(error).__name__
        handle.status = SpanStatus.ERROR
        handle.status_reason = reason

        try:
            handle.span.record_exception(error)
            handle.span.set_attribute(SpanAttributes.ERROR_TYPE, type(error).__name__)
            handle.span.set_attribute(SpanAttributes.ERROR_MESSAGE, str(error)[:500])
            handle.span.set_status(Status(StatusCode.ERROR, description=reason))
        except Exception as e:
            logger.debug(f"Failed to record error in span: {e}")

    def mark_error(self, handle: SpanHandle, reason: str) -> None:
        """Mark the span as errored when there is no exception object."""
        if not handle.is_running:
            return

        handle.status = SpanStatus.ERROR
        handle.status_reason = reason
        try:
            handle.span.set_status(Status(StatusCode.ERROR, description=reason))
        except Exception as e:
            logger.debug(f"Failed to set span error status: {e}")

    def end(self, handle: SpanHandle) -> None:
        """
        Close the span and hand it to the exporter pipeline.

        Calling end() more than once is a no-op, so every span is closed
        exactly once.
        """
        if handle.state is not SpanState.RUNNING:
            return

        handle.state = SpanState.ENDED
        with self._lock:
            self._open_spans -= 1
            self._ended_total += 1

        try:
            start_time = handle.start_time or 0
            handle.span.end(end_time=max(time.time_ns(), start_time))
        except Exception as e:
            logger.debug(f"Failed to end span {handle.name}: {e}")

    @contextmanager
    def span(
        self,
        name: str,
        parent: Optional[TraceContext] = None,
        root: bool = False,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Iterator[SpanHandle]:
        """
        Scoped span: active for the enclosed block and always ended on exit.

        Exceptions raised inside the block are recorded on the span and
        re-raised unchanged.
        """
        handle = self.start(name, parent=parent, root=root, kind=kind, attributes=attributes)
        try:
            with trace.use_span(
                handle.span,
                end_on_exit=False,
                record_exception=False,
                set_status_on_exception=False,
            ):
                yield handle
        except Exception as e:
            self.record_error(handle, e)
            raise
        finally:
            self.end(handle)
