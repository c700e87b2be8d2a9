# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Settings of the store API service."""

import os
from dataclasses import dataclass, field

SERVICE_NAME = "store-api"


@dataclass(frozen=True)
class StoreApiSettings:
    """Listening address and bottleneck size."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))
    # Iterations of the /products counting loop, roughly one second of CPU
    bottleneck_iterations: int = field(
        default_factory=lambda: int(os.getenv("BOTTLENECK_ITERATIONS", "50000000"))
    )

    def __post_init__(self):
        if self.bottleneck_iterations < 0:
            raise ValueError(
                f"BOTTLENECK_ITERATIONS must be non-negative: {self.bottleneck_iterations}"
            )
