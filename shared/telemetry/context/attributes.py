# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Standard span attribute keys for workshop services.

Provides consistent attribute naming across all services
for better trace analysis and filtering.
"""


class SpanAttributes:
    """Standard span attribute keys for consistent tracing."""

    # HTTP attributes (semantic conventions)
    HTTP_METHOD = "http.method"
    HTTP_ROUTE = "http.route"
    HTTP_TARGET = "http.target"
    HTTP_URL = "http.url"
    HTTP_STATUS_CODE = "http.status_code"
    HTTP_CLIENT_DURATION_MS = "http.client.duration_ms"

    # Server attributes
    SERVER_DURATION_MS = "http.server.duration_ms"

    # Error attributes
    ERROR_TYPE = "error.type"
    ERROR_MESSAGE = "error.message"

    # Bottleneck simulation attributes
    BOTTLENECK_SIMULATED = "bottleneck_simulated"
    BOTTLENECK_ITERATIONS = "bottleneck.iterations"
    BOTTLENECK_COMPLETED = "bottleneck.completed"

    # Simulated work attributes
    WORK_DURATION_MS = "work.duration_ms"

    # Resource attributes
    APPLICATION = "application"
