# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Core telemetry initialization and lifecycle.

A Telemetry object bundles everything one service needs to instrument itself:
its identity, span tracker, metrics registry and profiler. It is created once
at process start by create_telemetry() and passed explicitly to every
handler wrapper and outbound client, so tests can build as many isolated
instances as they like.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from opentelemetry.sdk.trace import TracerProvider as SDKTracerProvider
from opentelemetry.sdk.trace.export import SpanExporter

from shared.telemetry.config import TelemetryConfig
from shared.telemetry.context.span import SpanTracker
from shared.telemetry.metrics import DEFAULT_GAUGES, TelemetryRegistry
from shared.telemetry.profiling import Profiler
from shared.telemetry.providers import (build_resource, create_span_exporter,
                                        init_tracer_provider,
                                        install_global_providers,
                                        shutdown_tracer_provider)

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "shared.telemetry"


@dataclass(frozen=True)
class ServiceIdentity:
    """Process-level identity attached to every span, metric set and profile."""

    service_name: str
    environment: str = "workshop"
    version: str = "0.1.0"

    @classmethod
    def from_config(cls, config: TelemetryConfig) -> "ServiceIdentity":
        return cls(
            service_name=config.service_name,
            environment=config.environment,
            version=config.service_version,
        )


class Telemetry:
    """Instrumentation context of one service."""

    def __init__(
        self,
        config: TelemetryConfig,
        identity: ServiceIdentity,
        tracer_provider: SDKTracerProvider,
        registry: TelemetryRegistry,
        profiler: Optional[Profiler] = None,
    ):
        self.config = config
        self.identity = identity
        self.tracer_provider = tracer_provider
        self.tracker = SpanTracker(
            tracer_provider.get_tracer(INSTRUMENTATION_NAME, identity.version)
        )
        self.registry = registry
        self.profiler = profiler or Profiler()
        self._shutdown_lock = threading.Lock()
        self._shutdown_result: Optional[bool] = None

    @property
    def service_name(self) -> str:
        return self.identity.service_name

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown_result is not None

    def shutdown(self, grace_seconds: Optional[float] = None) -> bool:
        """
        Flush buffered spans and stop the profiler within a grace period.

        The span flush and the profiler stop each run on their own worker
        thread, so an exporter stuck in retries cannot hold back the profiler.
        Workers still running when the grace period expires are abandoned so
        that the process can terminate. Repeated calls return the result of
        the first one.

        Args:
            grace_seconds: Maximum time to wait, defaults to the configured grace period

        Returns:
            bool: True if everything was flushed within the grace period
        """
        with self._shutdown_lock:
            if self._shutdown_result is not None:
                return self._shutdown_result

            grace = grace_seconds if grace_seconds is not None else self.config.shutdown_grace_seconds
            timeout_millis = int(grace * 1000)
            workers = [
                threading.Thread(
                    target=shutdown_tracer_provider,
                    args=(self.tracer_provider,),
                    kwargs={"timeout_millis": timeout_millis},
                    name=f"{self.service_name}-span-flush",
                    daemon=True,
                ),
                threading.Thread(
                    target=self.profiler.stop,
                    name=f"{self.service_name}-profiler-stop",
                    daemon=True,
                ),
            ]
            for worker in workers:
                worker.start()

            deadline = time.monotonic() + grace
            for worker in workers:
                worker.join(max(0.0, deadline - time.monotonic()))

            pending = [worker.name for worker in workers if worker.is_alive()]
            if pending:
                logger.error(
                    f"Telemetry shutdown exceeded grace period of {grace}s, "
                    f"abandoning: {', '.join(pending)}"
                )
                self._shutdown_result = False
            else:
                logger.info("Telemetry shutdown completed")
                self._shutdown_result = True
            return self._shutdown_result


def create_telemetry(
    config: TelemetryConfig,
    span_exporter: Optional[SpanExporter] = None,
    synchronous_export: bool = False,
    install_globals: bool = False,
    start_profiler: bool = True,
) -> Telemetry:
    """
    Build the telemetry context of a service.

    Args:
        config: Telemetry configuration
        span_exporter: Exporter to use instead of the configured one (tests
                       pass an InMemorySpanExporter)
        synchronous_export: Export spans as they end instead of batching
        install_globals: Also register the provider and propagator process-wide
        start_profiler: Start the Pyroscope agent if a server is configured

    Returns:
        Telemetry: The service's telemetry context
    """
    identity = ServiceIdentity.from_config(config)

    if span_exporter is None:
        try:
            span_exporter = create_span_exporter(config)
        except Exception as e:
            # Trace backend problems must not prevent the service from starting
            logger.warning(f"Failed to create span exporter, spans will not be exported: {e}")
            span_exporter = None

    tracer_provider = init_tracer_provider(
        build_resource(identity),
        span_exporter,
        sampler_ratio=config.sampler_ratio,
        synchronous_export=synchronous_export,
    )
    registry = TelemetryRegistry(
        namespace=config.metrics_namespace,
        identity=identity,
        gauges=DEFAULT_GAUGES,
    )

    telemetry = Telemetry(config, identity, tracer_provider, registry)

    if install_globals:
        install_global_providers(tracer_provider)

    if start_profiler:
        telemetry.profiler.start(identity, config.profiling_server)

    logger.info(
        f"Telemetry initialized for service '{identity.service_name}' "
        f"(traces_exporter={config.traces_exporter}, "
        f"profiling={'on' if telemetry.profiler.active else 'off'})"
    )
    return telemetry
