# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Trace context propagation utilities.

Provides the TraceContext value type and functions for propagating it across
service boundaries as a W3C ``traceparent`` header:

    version-traceid-spanid-flags
    00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01

Encoding and parsing are done by OpenTelemetry's W3C TraceContext propagator.
A missing or malformed header yields None and the caller starts a new root
trace instead.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, MutableMapping, Optional

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags
from opentelemetry.trace.propagation.tracecontext import \
    TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

TRACEPARENT_HEADER = "traceparent"

_MAX_TRACE_ID = (1 << 128) - 1
_MAX_SPAN_ID = (1 << 64) - 1

_propagator = TraceContextTextMapPropagator()


@dataclass(frozen=True)
class TraceContext:
    """Identifies a position in a trace: which trace, and which span in it."""

    trace_id: int
    span_id: int
    sampled: bool = True

    def __post_init__(self):
        if not 0 < self.trace_id <= _MAX_TRACE_ID:
            raise ValueError(f"trace_id out of range: {self.trace_id}")
        if not 0 < self.span_id <= _MAX_SPAN_ID:
            raise ValueError(f"span_id out of range: {self.span_id}")

    @property
    def trace_id_hex(self) -> str:
        return format(self.trace_id, "032x")

    @property
    def span_id_hex(self) -> str:
        return format(self.span_id, "016x")

    def to_span_context(self) -> SpanContext:
        """Convert to a remote OpenTelemetry SpanContext usable as a parent."""
        flags = TraceFlags.SAMPLED if self.sampled else TraceFlags.DEFAULT
        return SpanContext(
            trace_id=self.trace_id,
            span_id=self.span_id,
            is_remote=True,
            trace_flags=TraceFlags(flags),
        )

    def to_otel_context(self) -> Context:
        """Build an OpenTelemetry Context whose active span is this remote parent."""
        return trace.set_span_in_context(
            NonRecordingSpan(self.to_span_context()), Context()
        )

    @classmethod
    def from_span_context(cls, span_context: SpanContext) -> Optional["TraceContext"]:
        """Build a TraceContext from an OpenTelemetry SpanContext, None if invalid."""
        if span_context is None or not span_context.is_valid:
            return None
        return cls(
            trace_id=span_context.trace_id,
            span_id=span_context.span_id,
            sampled=span_context.trace_flags.sampled,
        )


def inject_trace_context(
    ctx: TraceContext, carrier: Optional[MutableMapping[str, str]] = None
) -> MutableMapping[str, str]:
    """
    Inject a trace context into an outbound carrier (e.g. HTTP headers).

    Args:
        ctx: Trace context to propagate
        carrier: Optional existing headers mapping to update

    Returns:
        MutableMapping[str, str]: The carrier with the traceparent key set
    """
    if carrier is None:
        carrier = {}
    _propagator.inject(carrier, context=ctx.to_otel_context())
    return carrier


def _lowercase_keys(carrier: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        name.lower(): value for name, value in carrier.items() if isinstance(name, str)
    }


def extract_trace_context(carrier: Optional[Mapping[str, Any]]) -> Optional[TraceContext]:
    """
    Extract a trace context from an inbound carrier (e.g. HTTP headers).

    Header names are matched case-insensitively, so plain dicts, Starlette
    and httpx header containers all work.

    Args:
        carrier: Headers mapping containing the traceparent key

    Returns:
        Optional[TraceContext]: Extracted context, or None if absent or malformed
    """
    if not carrier:
        return None

    try:
        headers = _lowercase_keys(carrier)
        raw = headers.get(TRACEPARENT_HEADER)
        if not isinstance(raw, str):
            return None
        otel_context = _propagator.extract(headers)
    except Exception as e:
        logger.debug(f"Failed to extract trace context from carrier: {e}")
        return None

    ctx = TraceContext.from_span_context(
        trace.get_current_span(otel_context).get_span_context()
    )
    if ctx is None:
        logger.debug(f"Ignoring malformed traceparent header: {raw!r}")
    return ctx


def current_trace_context() -> Optional[TraceContext]:
    """Return the TraceContext of the active span, or None if there is none."""
    return TraceContext.from_span_context(trace.get_current_span().get_span_context())
