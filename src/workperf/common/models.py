# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Data models for requests, outcomes and run results."""

import msgspec
from pydantic import BaseModel, ConfigDict, Field


class RequestOutcome(msgspec.Struct, frozen=True):
    """Result of a single work request attempt. Produced per request, never persisted.

    Attributes:
        correlation_id: Per-request identifier used only for tracing
        elapsed_millis: Time from send to response (or to failure)
        succeeded: Whether the target answered with a success status
        error: Short error description for failed attempts
    """

    correlation_id: str
    elapsed_millis: float
    succeeded: bool
    error: str | None = None


class RunResult(BaseModel):
    """Summary statistics for one measured phase.

    Derived once from a frozen, sorted copy of the samples and never mutated.
    Latencies are in milliseconds; percentiles use the nearest-rank method.
    """

    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=0, description="Number of successful samples")
    failure_count: int = Field(default=0, ge=0, description="Number of failed requests")
    total_wall_clock_sec: float = Field(ge=0, description="Wall clock time of the phase")
    average_ms: float = 0.0
    p50_ms: float = 0.0
    p95_ms: float = 0.0
    p99_ms: float = 0.0
    requests_per_second: float = 0.0

    @property
    def has_samples(self) -> bool:
        return self.count > 0

    @property
    def total_wall_clock_ms(self) -> float:
        return self.total_wall_clock_sec * 1000


class WorkRequest(BaseModel):
    """REST request body for `POST /api/work`."""

    model_config = ConfigDict(populate_by_name=True)

    payload_size: int = Field(alias="payloadSize")
    correlation_id: str | None = Field(default=None, alias="correlationId")


class WorkResponse(BaseModel):
    """REST response body for `POST /api/work`."""

    model_config = ConfigDict(populate_by_name=True)

    big_string: str = Field(default="", alias="bigString")
    items: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
