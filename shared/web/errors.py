# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Business error types understood by the handler wrapper.

A handler raises a ServiceError to fail a request with a specific transport
status code. Any other exception is reported as 500.
"""

from starlette.exceptions import HTTPException as StarletteHTTPException

INTERNAL_ERROR_STATUS = 500
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class ServiceError(Exception):
    """Request-scoped failure carrying the status code to respond with."""

    status_code = INTERNAL_ERROR_STATUS

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UpstreamError(ServiceError):
    """A downstream service answered with a non-success status."""

    status_code = 502


def error_status_code(error: BaseException) -> int:
    """Transport status code declared by an error, 500 if it declares none."""
    if isinstance(error, (ServiceError, StarletteHTTPException)):
        return error.status_code
    return INTERNAL_ERROR_STATUS


def error_message(error: BaseException) -> str:
    """Message safe to return to the caller."""
    if isinstance(error, ServiceError):
        return error.message
    if isinstance(error, StarletteHTTPException):
        return str(error.detail)
    return INTERNAL_ERROR_MESSAGE
