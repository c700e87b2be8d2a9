# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Telemetry integration module for workshop services.

This module provides a unified interface for distributed tracing, request
metrics, continuous profiling and context propagation across all services.

Directory Structure:
    telemetry/
    ├── __init__.py          # Public API exports (this file)
    ├── core.py              # ServiceIdentity, Telemetry context and lifecycle
    ├── config.py            # Configuration from environment
    ├── providers.py         # TracerProvider and span export pipeline
    ├── metrics.py           # TelemetryRegistry (Prometheus)
    ├── profiling.py         # Pyroscope profiler
    ├── bottleneck.py        # Synthetic CPU bottleneck
    └── context/
        ├── __init__.py      # Context utilities exports
        ├── attributes.py    # Standard span attribute keys
        ├── events.py        # Span names and profiler tags
        ├── span.py          # SpanTracker and SpanHandle
        └── propagation.py   # TraceContext and traceparent propagation

Usage:
    from shared.telemetry import create_telemetry, get_telemetry_config
    from shared.telemetry.context import extract_trace_context, inject_trace_context
"""

# Configuration
from shared.telemetry.config import (TelemetryConfig, get_telemetry_config,
                                     reset_telemetry_config)
# Core initialization and lifecycle
from shared.telemetry.core import ServiceIdentity, Telemetry, create_telemetry
# Metrics
from shared.telemetry.metrics import TelemetryRegistry, UnknownMetricError
# Bottleneck simulation
from shared.telemetry.bottleneck import simulate_bottleneck

__all__ = [
    # Core
    "create_telemetry",
    "Telemetry",
    "ServiceIdentity",
    # Config
    "TelemetryConfig",
    "get_telemetry_config",
    "reset_telemetry_config",
    # Metrics
    "TelemetryRegistry",
    "UnknownMetricError",
    # Bottleneck
    "simulate_bottleneck",
]
