# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

MILLIS_PER_SECOND = 1000
NANOS_PER_MILLIS = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

# OpenTelemetry instrumentation scope names shared by the driver and the target service.
ACTIVITY_SOURCE_NAME = "PerfReference"
METER_NAME = "PerfReference.Metrics"
LATENCY_HISTOGRAM_NAME = "bff.request_latency_ms"

WORK_API_PATH = "/api/work"
