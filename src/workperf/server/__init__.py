# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Reference implementation of the work service targeted by the load driver."""

from workperf.server.payload import PayloadData, generate_payload
from workperf.server.runner import WorkServer

__all__ = [
    "PayloadData",
    "WorkServer",
    "generate_payload",
]
