# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from workperf.proto.work_service import (
    GET_WORK_METHOD,
    PACKAGE,
    SERVICE_NAME,
    WorkRequest,
    WorkResponse,
)

__all__ = [
    "GET_WORK_METHOD",
    "PACKAGE",
    "SERVICE_NAME",
    "WorkRequest",
    "WorkResponse",
]
