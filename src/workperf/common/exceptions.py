# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0


class WorkPerfError(Exception):
    """Base class for all workperf errors."""


class ConfigurationError(WorkPerfError, ValueError):
    """Raised when run configuration is invalid. The run never starts."""


class FatalRunError(WorkPerfError):
    """Raised when the load driver itself fails (worker pool, admission gate or timers).

    No partial statistics are reported when this is raised.
    """
