# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
OpenTelemetry provider initialization module.

Builds the TracerProvider of one service: resource attributes from the
service identity, a parent-based ratio sampler and the span export pipeline.
Finished spans are handed to a BatchSpanProcessor, whose bounded queue and
background worker keep exporter latency and failures off the request path.
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import \
    OTLPSpanExporter
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import (DEPLOYMENT_ENVIRONMENT, SERVICE_NAME,
                                         SERVICE_VERSION, Resource)
from opentelemetry.sdk.trace import TracerProvider as SDKTracerProvider
from opentelemetry.sdk.trace.export import (BatchSpanProcessor,
                                            ConsoleSpanExporter,
                                            SimpleSpanProcessor, SpanExporter)
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio
from opentelemetry.trace.propagation.tracecontext import \
    TraceContextTextMapPropagator

from shared.telemetry.config import TelemetryConfig
from shared.telemetry.context.attributes import SpanAttributes

logger = logging.getLogger(__name__)


def build_resource(identity) -> Resource:
    """
    Build the resource attached to every span of the service.

    Args:
        identity: ServiceIdentity of the process
    """
    return Resource.create(
        {
            SERVICE_NAME: identity.service_name,
            SERVICE_VERSION: identity.version,
            DEPLOYMENT_ENVIRONMENT: identity.environment,
            SpanAttributes.APPLICATION: identity.service_name,
        }
    )


def create_span_exporter(config: TelemetryConfig) -> Optional[SpanExporter]:
    """
    Create the span exporter selected by configuration.

    Returns:
        Optional[SpanExporter]: The exporter, or None when export is disabled
    """
    if config.traces_exporter == "none":
        logger.info("Span export disabled (OTEL_TRACES_EXPORTER=none)")
        return None

    if config.traces_exporter == "console":
        return ConsoleSpanExporter(service_name=config.service_name)

    # Short timeout ensures we don't block if the trace backend is down
    return OTLPSpanExporter(
        endpoint=config.otlp_endpoint,
        insecure=True,
        timeout=5,
    )


def init_tracer_provider(
    resource: Resource,
    span_exporter: Optional[SpanExporter],
    sampler_ratio: float = 1.0,
    synchronous_export: bool = False,
) -> SDKTracerProvider:
    """
    Initialize and configure a TracerProvider for one service.

    The BatchSpanProcessor is configured with fail-safe settings to ensure
    that if the trace backend is unavailable, the service will not be
    affected. Spans will be dropped rather than blocking the application.

    Args:
        resource: OpenTelemetry resource with service attributes
        span_exporter: Exporter receiving finished spans, None to disable export
        sampler_ratio: Trace sampling ratio (0.0 to 1.0)
        synchronous_export: Export each span as it ends instead of batching.
                            Used by tests with an in-memory exporter.

    Returns:
        SDKTracerProvider: The configured provider
    """
    sampler = ParentBasedTraceIdRatio(sampler_ratio)
    tracer_provider = SDKTracerProvider(resource=resource, sampler=sampler)

    if span_exporter is not None:
        if synchronous_export:
            span_processor = SimpleSpanProcessor(span_exporter)
        else:
            # - max_queue_size: Maximum spans to queue (new spans dropped if exceeded)
            # - schedule_delay_millis: How often to export batches
            # - max_export_batch_size: Maximum spans per export batch
            # - export_timeout_millis: Timeout for each export attempt
            span_processor = BatchSpanProcessor(
                span_exporter,
                max_queue_size=2048,
                schedule_delay_millis=5000,
                max_export_batch_size=512,
                export_timeout_millis=10000,
            )
        tracer_provider.add_span_processor(span_processor)

    logger.debug(
        f"TracerProvider initialized with exporter: {type(span_exporter).__name__}, "
        f"sampler_ratio: {sampler_ratio}, synchronous_export: {synchronous_export}"
    )
    return tracer_provider


def install_global_providers(tracer_provider: SDKTracerProvider) -> None:
    """
    Register the provider and the W3C trace context and baggage
    propagators process-wide.

    Only the service entrypoints call this, so that third-party OpenTelemetry
    instrumentation reports into the same pipeline. The workshop wrappers
    themselves always use the Telemetry object they are given.
    """
    set_global_textmap(
        CompositePropagator(
            [TraceContextTextMapPropagator(), W3CBaggagePropagator()]
        )
    )
    trace.set_tracer_provider(tracer_provider)
    logger.debug("Global TracerProvider and W3C propagators installed")


def shutdown_tracer_provider(
    tracer_provider: SDKTracerProvider, timeout_millis: int = 5000
) -> None:
    """
    Flush pending spans and shut the provider down.

    Exporter failures are logged and dropped.
    """
    try:
        if not tracer_provider.force_flush(timeout_millis=timeout_millis):
            logger.warning("Timed out flushing pending spans")
    except Exception as e:
        logger.error(f"Error flushing spans: {e}")

    try:
        tracer_provider.shutdown()
        logger.debug("TracerProvider shutdown completed")
    except Exception as e:
        logger.error(f"Error during TracerProvider shutdown: {e}")
