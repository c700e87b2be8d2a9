# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Standardized span names and profiler tags.

This module provides centralized constants for span names used across all
services for consistent observability.
"""


class SpanNames:
    """Standardized span names for common operations."""

    # Store API
    PRODUCTS_HANDLER = "products-handler"
    EMPLOYEES_HANDLER = "employees-handler"
    SIMULATE_CPU_WORK = "simulate-cpu-work"

    # Store client
    CLIENT_LANDING_PAGE = "client-landing-page"
    CLIENT_PRODUCTS_PAGE = "client-products-page"

    # Example app
    ROOT_HANDLER = "root-handler"
    ERROR_HANDLER = "error-handler"

    # Outbound hop, format with method and path
    HTTP_CLIENT_REQUEST = "HTTP {method} {path}"


class ProfileTags:
    """Tag keys attached to profiling samples."""

    SERVICE = "service"
    ENVIRONMENT = "environment"
    OPERATION = "operation"
