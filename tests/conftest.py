# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from unittest.mock import Mock

import pytest

from workperf.common.config import FixedCount, FixedDuration, RunConfig
from workperf.common.enums import Protocol
from workperf.common.environment import Environment


@pytest.fixture(autouse=True)
def quiet_event_loop_monitor(monkeypatch) -> None:
    """Timing-sensitive tests should not depend on loop lag warnings."""
    monkeypatch.setattr(Environment.DRIVER, "EVENT_LOOP_HEALTH_ENABLED", False)


@pytest.fixture
def count_config():
    """Factory for fixed-count RunConfig instances."""

    def _create(iterations: int = 50, concurrency: int = 4, **kwargs) -> RunConfig:
        defaults = {
            "backend": "net10",
            "protocol": Protocol.REST,
            "payload_size": 128,
        }
        defaults.update(kwargs)
        return RunConfig(
            concurrency=concurrency, mode=FixedCount(iterations=iterations), **defaults
        )

    return _create


@pytest.fixture
def duration_config():
    """Factory for fixed-duration RunConfig instances."""

    def _create(
        duration_seconds: float = 0.2,
        warmup_seconds: float = 0.0,
        concurrency: int = 4,
        **kwargs,
    ) -> RunConfig:
        defaults = {
            "backend": "net10",
            "protocol": Protocol.REST,
            "payload_size": 128,
        }
        defaults.update(kwargs)
        return RunConfig(
            concurrency=concurrency,
            mode=FixedDuration(
                duration_seconds=duration_seconds, warmup_seconds=warmup_seconds
            ),
            **defaults,
        )

    return _create


@pytest.fixture
def latency_recorder() -> Mock:
    """Stand-in for the telemetry histogram recorder."""
    return Mock(spec=["record"])
