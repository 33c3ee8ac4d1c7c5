# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from workperf.common.config.load_config import LoadConfig
from workperf.common.config.run_config import (
    FixedCount,
    FixedDuration,
    RunConfig,
    RunMode,
)

__all__ = [
    "FixedCount",
    "FixedDuration",
    "LoadConfig",
    "RunConfig",
    "RunMode",
]
