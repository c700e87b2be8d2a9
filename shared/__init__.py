#!/usr/bin/env python

# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

# -*- coding: utf-8 -*-

"""
Shared instrumentation library for the telemetry workshop services
"""

__all__ = [
    "telemetry",
    "web",
    "logger",
]
