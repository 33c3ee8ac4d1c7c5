# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from workperf.common.enums import Protocol as WireProtocol
    from workperf.common.models import RequestOutcome


@runtime_checkable
class WorkDispatcherProtocol(Protocol):
    """Anything that can perform one work request round trip.

    Implementations must never raise for a per-request failure; they return an
    outcome with `succeeded=False` instead.
    """

    def check_target(self, backend: str, protocol: WireProtocol) -> None:
        """Raise `ConfigurationError` if `backend` cannot be reached over `protocol`."""
        ...

    async def dispatch(
        self,
        backend: str,
        protocol: WireProtocol,
        payload_size: int,
        correlation_id: str,
    ) -> RequestOutcome: ...
