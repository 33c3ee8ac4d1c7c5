# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from workperf.dispatch.dispatcher import Dispatcher
from workperf.dispatch.protocols import WorkDispatcherProtocol
from workperf.dispatch.targets import resolve_endpoint

__all__ = [
    "Dispatcher",
    "WorkDispatcherProtocol",
    "resolve_endpoint",
]
