# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Continuous profiling with Pyroscope.

Profiles are pushed to the Pyroscope server named by PYROSCOPE_SERVER_ADDRESS,
tagged with the service name and environment. Profiling is optional: when the
server is not configured or the pyroscope-io package is not installed, the
service runs without it and Profiler.tags() is a no-op.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from shared.telemetry.context.events import ProfileTags

logger = logging.getLogger(__name__)


class Profiler:
    """Pyroscope agent lifecycle for one process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._module = None

    @property
    def active(self) -> bool:
        return self._module is not None

    def start(self, identity, server_address: Optional[str]) -> bool:
        """
        Start pushing CPU profiles.

        Args:
            identity: ServiceIdentity used as application name and tags
            server_address: Pyroscope server URL, None to skip profiling

        Returns:
            bool: True if the profiler is running
        """
        if not server_address:
            logger.info("Pyroscope profiling disabled (PYROSCOPE_SERVER_ADDRESS not set)")
            return False

        with self._lock:
            if self._module is not None:
                return True

            try:
                import pyroscope

                pyroscope.configure(
                    application_name=identity.service_name,
                    server_address=server_address,
                    tags={
                        ProfileTags.ENVIRONMENT: identity.environment,
                        ProfileTags.SERVICE: identity.service_name,
                    },
                    oncpu=True,
                    gil_only=True,
                    enable_logging=True,
                )
                self._module = pyroscope
                logger.info(f"Pyroscope profiling initialized: server={server_address}")
                return True
            except ImportError:
                logger.warning("Pyroscope profiling skipped: pyroscope-io not installed")
            except Exception as e:
                # Profiler failures must never stop the service
                logger.warning(f"Failed to initialize Pyroscope profiling: {e}")
            return False

    @contextmanager
    def tags(self, tags: Dict[str, str]) -> Iterator[None]:
        """Attach extra tags to samples taken inside the block."""
        module = self._module
        if module is None:
            yield
            return

        with module.tag_wrapper(tags):
            yield

    def stop(self) -> None:
        with self._lock:
            module, self._module = self._module, None
        if module is None:
            return
        try:
            module.shutdown()
            logger.debug("Pyroscope profiler stopped")
        except Exception as e:
            logger.error(f"Error stopping Pyroscope profiler: {e}")
