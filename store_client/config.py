# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Settings of the store client service."""

import os
from dataclasses import dataclass, field

SERVICE_NAME = "store-client"


@dataclass(frozen=True)
class StoreClientSettings:
    """Listening address and location of the store API."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8081")))
    api_service_url: str = field(
        default_factory=lambda: os.getenv("API_SERVICE_URL", "http://store-api:8080")
    )
