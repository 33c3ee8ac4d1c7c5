# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""workperf - concurrent load generation and latency measurement for the work service."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("workperf")
except PackageNotFoundError:
    __version__ = "unknown"
