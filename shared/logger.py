# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Logging setup shared by all workshop services.

Every record is stamped with the trace_id/span_id of the active span so that
log lines can be correlated with traces in the dashboard.
"""

import logging
import os
import sys
from typing import Optional

from opentelemetry import trace

LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(name)s] "
    "[trace_id=%(trace_id)s span_id=%(span_id)s] %(message)s"
)


class TraceContextFilter(logging.Filter):
    """Adds trace_id and span_id of the current span to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            record.trace_id = format(span_context.trace_id, "032x")
            record.span_id = format(span_context.span_id, "016x")
        else:
            record.trace_id = "-"
            record.span_id = "-"
        return True


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with the workshop handler attached.

    Args:
        name: Logger name, usually __name__
        level: Log level name. Defaults to the LOG_LEVEL environment variable or INFO.

    Returns:
        logging.Logger: Configured logger
    """
    logger = logging.getLogger(name)
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    # Avoid duplicate handlers when called repeatedly for the same name
    if not any(getattr(h, "_workshop_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(TraceContextFilter())
        handler._workshop_handler = True
        logger.addHandler(handler)
        logger.propagate = False

    return logger
