# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
HTTP surfaces of the instrumentation pipeline: inbound handler wrapper,
outbound client and the service application factory.
"""

from shared.web.app import create_service_app, run_service
from shared.web.client import InstrumentedClient
from shared.web.errors import ServiceError, UpstreamError
from shared.web.handler import (Handler, InstrumentedHandler,
                                current_span_handle, register_route)

__all__ = [
    "Handler",
    "InstrumentedHandler",
    "register_route",
    "current_span_handle",
    "InstrumentedClient",
    "ServiceError",
    "UpstreamError",
    "create_service_app",
    "run_service",
]
