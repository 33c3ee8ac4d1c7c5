# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Run result exporters."""

from workperf.exporters.console_exporter import (
    NO_LATENCIES_MESSAGE,
    ConsoleExporter,
    format_run_summary,
)
from workperf.exporters.json_exporter import JsonExporter

__all__ = [
    "NO_LATENCIES_MESSAGE",
    "ConsoleExporter",
    "JsonExporter",
    "format_run_summary",
]
