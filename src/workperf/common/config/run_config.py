# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Immutable run configuration consumed by the load driver."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from workperf.common.enums import ExecutionMode, Protocol


class FixedCount(BaseModel):
    """Send exactly `iterations` requests."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed_count"] = ExecutionMode.FIXED_COUNT.value
    iterations: int = Field(gt=0)


class FixedDuration(BaseModel):
    """Keep `concurrency` workers busy for `duration_seconds`, after an optional warm-up."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed_duration"] = ExecutionMode.FIXED_DURATION.value
    duration_seconds: float = Field(gt=0)
    warmup_seconds: float = Field(default=0.0, ge=0)


RunMode = Annotated[FixedCount | FixedDuration, Field(discriminator="kind")]


class RunConfig(BaseModel):
    """Configuration for a single load run. Created once and never mutated.

    Attributes:
        concurrency: Maximum number of requests in flight at once
        mode: Fixed request count or fixed duration (with optional warm-up)
        protocol: Wire protocol used to reach the target
        backend: Name of the target deployment, only selects the endpoint
        payload_size: Forwarded to the target unchanged; the target clamps negatives to 0
    """

    model_config = ConfigDict(frozen=True)

    concurrency: int = Field(gt=0)
    mode: RunMode
    protocol: Protocol = Protocol.REST
    backend: str = "framework"
    payload_size: int = 4096

    @property
    def is_duration_mode(self) -> bool:
        return isinstance(self.mode, FixedDuration)
