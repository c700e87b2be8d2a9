# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Telemetry context utilities module.

Provides the span tracker and the trace context propagation used across
service boundaries.
"""

# Span attribute keys
from shared.telemetry.context.attributes import SpanAttributes
# Span names and profiler tags
from shared.telemetry.context.events import ProfileTags, SpanNames
# Trace context propagation
from shared.telemetry.context.propagation import (
    TRACEPARENT_HEADER, TraceContext, current_trace_context,
    extract_trace_context, inject_trace_context)
# Span tracking
from shared.telemetry.context.span import (SpanHandle, SpanState, SpanStatus,
                                           SpanTracker)

__all__ = [
    # Attributes
    "SpanAttributes",
    # Names and tags
    "SpanNames",
    "ProfileTags",
    # Span tracking
    "SpanTracker",
    "SpanHandle",
    "SpanState",
    "SpanStatus",
    # Propagation
    "TraceContext",
    "TRACEPARENT_HEADER",
    "inject_trace_context",
    "extract_trace_context",
    "current_trace_context",
]
