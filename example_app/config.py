# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Settings of the example app."""

import os
from dataclasses import dataclass, field

SERVICE_NAME = "example-app"


@dataclass(frozen=True)
class ExampleAppSettings:
    """Listening address and upper bound of the simulated work."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))
    max_work_ms: int = field(
        default_factory=lambda: int(os.getenv("MAX_WORK_MS", "1000"))
    )

    def __post_init__(self):
        if self.max_work_ms <= 0:
            raise ValueError(f"MAX_WORK_MS must be positive: {self.max_work_ms}")
