# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Store API service: product catalog with a CPU bottleneck and staff list.
"""
