# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Synthetic CPU bottleneck.

simulate_bottleneck() burns CPU in a plain counting loop under its own span,
so the work shows up as a wide child span in the trace view and as a hot,
recognizable frame (``_count``) in the flame graph.
"""

import logging
import threading
from typing import Optional

from shared.telemetry.context.attributes import SpanAttributes
from shared.telemetry.context.events import ProfileTags, SpanNames
from shared.telemetry.context.span import SpanTracker

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 1_000_000


def _count(iterations: int, cancel_event: Optional[threading.Event], check_interval: int) -> int:
    counter = 0
    remaining = iterations
    while remaining > 0:
        chunk = min(check_interval, remaining)
        for _ in range(chunk):
            counter += 1
        remaining -= chunk
        if cancel_event is not None and cancel_event.is_set():
            break
    return counter


def simulate_bottleneck(
    tracker: SpanTracker,
    iterations: int,
    cancel_event: Optional[threading.Event] = None,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
    profiler=None,
) -> int:
    """
    Intentionally consume CPU time.

    Args:
        tracker: Span tracker of the calling service
        iterations: Number of loop iterations to run
        cancel_event: Optional event checked every check_interval iterations;
                      the loop exits early once it is set
        check_interval: Iterations between cancellation checks
        profiler: Optional Profiler used to tag samples taken during the loop

    Returns:
        int: Number of iterations actually performed
    """
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative: {iterations}")
    if check_interval <= 0:
        raise ValueError(f"check_interval must be positive: {check_interval}")

    with tracker.span(
        SpanNames.SIMULATE_CPU_WORK,
        attributes={SpanAttributes.BOTTLENECK_ITERATIONS: iterations},
    ) as handle:
        logger.info("Simulating a CPU-intensive bottleneck...")

        if profiler is not None:
            with profiler.tags({ProfileTags.OPERATION: SpanNames.SIMULATE_CPU_WORK}):
                counter = _count(iterations, cancel_event, check_interval)
        else:
            counter = _count(iterations, cancel_event, check_interval)

        tracker.set_attribute(handle, SpanAttributes.BOTTLENECK_COMPLETED, counter)
        logger.info(f"CPU-intensive work complete, counter={counter}")

    return counter
