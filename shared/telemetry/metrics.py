# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Request metrics registry backed by prometheus_client.

Each service owns one TelemetryRegistry with a private CollectorRegistry.
Label sets are fixed here (route, method, status_code) and route values come
from registered route templates, never from raw request paths, so label
cardinality stays bounded.

Usage:
    registry = TelemetryRegistry("workshop", identity, gauges={"work_level": "..."})
    registry.increment_request("/products", "GET", 200)
    registry.observe_latency("/products", 0.42)
    body, content_type = registry.export()
"""

from typing import Dict, List, Mapping, Optional, Tuple

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Gauge, Histogram, Info, generate_latest)
from prometheus_client.metrics_core import Metric

# Prometheus client default upper bounds, without +Inf (added implicitly)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

REQUEST_LABELS = ("route", "method", "status_code")
LATENCY_LABELS = ("route",)

DEFAULT_GAUGES = {
    "work_level": "Current work level of the application.",
}


class UnknownMetricError(KeyError):
    """Raised when setting a gauge that was not declared at startup."""


class TelemetryRegistry:
    """
    Process-wide request counters, latency histograms and gauges.

    Counters only increase and the registry is never reset for the life of
    the process. All operations are safe from concurrent threads and tasks.
    """

    def __init__(
        self,
        namespace: str = "workshop",
        identity=None,
        gauges: Optional[Mapping[str, str]] = None,
        buckets: Tuple[float, ...] = LATENCY_BUCKETS,
    ):
        self.namespace = namespace
        self._registry = CollectorRegistry(auto_describe=True)

        self._requests = Counter(
            "http_requests",
            "Total number of HTTP requests.",
            REQUEST_LABELS,
            namespace=namespace,
            registry=self._registry,
        )
        self._latency = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency in seconds.",
            LATENCY_LABELS,
            namespace=namespace,
            buckets=buckets,
            registry=self._registry,
        )

        self._gauges: Dict[str, Gauge] = {}
        for name, documentation in (gauges if gauges is not None else DEFAULT_GAUGES).items():
            self._gauges[name] = Gauge(
                name, documentation, namespace=namespace, registry=self._registry
            )

        if identity is not None:
            service_info = Info(
                "service",
                "Service identity attached to every exported metric set.",
                namespace=namespace,
                registry=self._registry,
            )
            service_info.info(
                {
                    "service_name": identity.service_name,
                    "environment": identity.environment,
                    "version": identity.version,
                }
            )

    @property
    def gauge_names(self) -> List[str]:
        return sorted(self._gauges)

    def increment_request(self, route: str, method: str, status_code: int) -> None:
        """Count one completed request."""
        self._requests.labels(
            route=route, method=method.upper(), status_code=str(int(status_code))
        ).inc()

    def observe_latency(self, route: str, seconds: float) -> None:
        """Record one request latency observation for a route."""
        if seconds < 0:
            raise ValueError(f"Latency cannot be negative: {seconds}")
        self._latency.labels(route=route).observe(seconds)

    def set_gauge(self, name: str, value: float) -> None:
        """Set a gauge declared at construction time."""
        gauge = self._gauges.get(name)
        if gauge is None:
            raise UnknownMetricError(name)
        gauge.set(value)

    def get_sample_value(
        self, name: str, labels: Optional[Mapping[str, str]] = None
    ) -> Optional[float]:
        """
        Read the current value of one sample.

        Args:
            name: Full sample name, including namespace and suffix
                  (e.g. "workshop_http_requests_total")
            labels: Label values of the sample

        Returns:
            Optional[float]: Sample value or None if the sample does not exist
        """
        return self._registry.get_sample_value(name, dict(labels or {}))

    def snapshot(self) -> List[Metric]:
        """Collect all metric families. Has no side effects."""
        return list(self._registry.collect())

    def export(self) -> Tuple[bytes, str]:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self._registry), CONTENT_TYPE_LATEST
