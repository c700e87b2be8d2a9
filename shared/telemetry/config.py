# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Telemetry configuration module.

Provides centralized configuration loading from environment variables
for all workshop services. This is the single source of truth for tracing,
metrics and profiling configuration across store_api, store_client and
example_app.

Environment Variables:
    OTEL_SERVICE_NAME: Service name for tracing (default: workshop-service)
    OTEL_TRACES_EXPORTER: Span exporter, one of otlp, console, none (default: otlp)
    OTEL_EXPORTER_OTLP_TRACES_ENDPOINT: OTLP gRPC endpoint (default: http://tempo:4317)
    OTEL_TRACES_SAMPLER_ARG: Sampling ratio 0.0-1.0 (default: 1.0)
    PYROSCOPE_SERVER_ADDRESS: Pyroscope server address (default: unset, profiling disabled)
    WORKSHOP_ENVIRONMENT: Environment tag for spans and profiles (default: workshop)
    SERVICE_VERSION: Service version resource attribute (default: 0.1.0)
    METRICS_NAMESPACE: Prefix of every exported metric name (default: workshop)
    OUTBOUND_TIMEOUT_SECONDS: Timeout for every outbound HTTP call (default: 5.0)
    SHUTDOWN_GRACE_SECONDS: Maximum time spent flushing exporters on shutdown (default: 5.0)
"""

import os
from dataclasses import dataclass
from typing import Optional

TRACES_EXPORTERS = ("otlp", "console", "none")


@dataclass
class TelemetryConfig:
    """
    Telemetry configuration dataclass.

    This class holds all telemetry configuration values loaded from environment
    variables. Use get_telemetry_config() to get a cached instance, or build
    one directly in tests.
    """

    service_name: str
    traces_exporter: str = "otlp"
    otlp_endpoint: str = "http://tempo:4317"
    sampler_ratio: float = 1.0
    profiling_server: Optional[str] = None
    environment: str = "workshop"
    service_version: str = "0.1.0"
    metrics_namespace: str = "workshop"
    outbound_timeout: float = 5.0
    shutdown_grace_seconds: float = 5.0

    def __post_init__(self):
        if self.traces_exporter not in TRACES_EXPORTERS:
            raise ValueError(
                f"Unsupported traces exporter '{self.traces_exporter}', "
                f"expected one of {', '.join(TRACES_EXPORTERS)}"
            )
        if not 0.0 <= self.sampler_ratio <= 1.0:
            raise ValueError(f"Sampler ratio must be within [0, 1]: {self.sampler_ratio}")
        if self.outbound_timeout <= 0:
            raise ValueError("Outbound timeout must be positive")
        if self.shutdown_grace_seconds <= 0:
            raise ValueError("Shutdown grace period must be positive")

    @property
    def profiling_enabled(self) -> bool:
        return bool(self.profiling_server)


# Cached configuration instance
_telemetry_config: Optional[TelemetryConfig] = None


def get_telemetry_config(service_name_override: Optional[str] = None) -> TelemetryConfig:
    """
    Get telemetry configuration from environment variables.

    This function returns a cached TelemetryConfig instance. The configuration
    is loaded once from environment variables and reused for subsequent calls.

    Args:
        service_name_override: Service name used when OTEL_SERVICE_NAME is unset.
                              Only used on first call when config is created.

    Returns:
        TelemetryConfig: Configuration dataclass with all telemetry settings

    Example:
        >>> config = get_telemetry_config("store-api")
        >>> telemetry = create_telemetry(config)
    """
    global _telemetry_config

    if _telemetry_config is None:
        service_name = os.getenv("OTEL_SERVICE_NAME") or service_name_override
        _telemetry_config = TelemetryConfig(
            service_name=service_name or "workshop-service",
            traces_exporter=os.getenv("OTEL_TRACES_EXPORTER", "otlp").lower(),
            otlp_endpoint=os.getenv(
                "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "http://tempo:4317"
            ),
            sampler_ratio=float(os.getenv("OTEL_TRACES_SAMPLER_ARG", "1.0")),
            profiling_server=os.getenv("PYROSCOPE_SERVER_ADDRESS") or None,
            environment=os.getenv("WORKSHOP_ENVIRONMENT", "workshop"),
            service_version=os.getenv("SERVICE_VERSION", "0.1.0"),
            metrics_namespace=os.getenv("METRICS_NAMESPACE", "workshop"),
            outbound_timeout=float(os.getenv("OUTBOUND_TIMEOUT_SECONDS", "5.0")),
            shutdown_grace_seconds=float(os.getenv("SHUTDOWN_GRACE_SECONDS", "5.0")),
        )

    return _telemetry_config


def reset_telemetry_config() -> None:
    """
    Reset the cached telemetry configuration.

    This is primarily useful for testing purposes where you need to
    reload configuration with different environment variables.
    """
    global _telemetry_config
    _telemetry_config = None
