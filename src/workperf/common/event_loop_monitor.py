# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Event loop lag monitoring for load runs.

All workers share one event loop, so a blocked loop shows up as extra latency
on every in-flight request. The monitor makes such stalls visible instead of
letting them silently skew the percentiles.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from workperf.common.constants import (
    MILLIS_PER_SECOND,
    NANOS_PER_MILLIS,
    NANOS_PER_SECOND,
)
from workperf.common.environment import Environment
from workperf.common.logging import LoggerMixin


class EventLoopMonitor(LoggerMixin):
    """Background task that sleeps for a known interval and measures the overshoot.

    Configurable via Environment.DRIVER:
    - WORKPERF_DRIVER_EVENT_LOOP_HEALTH_ENABLED: Enable/disable monitoring (default: True)
    - WORKPERF_DRIVER_EVENT_LOOP_HEALTH_INTERVAL: Sleep interval in seconds (default: 0.25)
    - WORKPERF_DRIVER_EVENT_LOOP_HEALTH_WARN_THRESHOLD_MS: Warning threshold in ms (default: 10)
    """

    def __init__(self, name: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._name = name
        self._task: asyncio.Task | None = None
        self._stop_requested = False
        self._callback: Callable[[float], Awaitable] | None = None
        self.stall_count = 0
        self.max_lag_ms = 0.0

    def set_callback(self, callback: Callable[[float], Awaitable]) -> None:
        """Set the callback to be called with the lag in ms when the loop is blocked."""
        self._callback = callback

    def start(self) -> None:
        self._stop_requested = False
        if self._task is None:
            self._task = asyncio.create_task(self._monitor_event_loop())

    def stop(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True
        if self._task is not None:
            self._task.cancel()
        self._task = None

    async def _monitor_event_loop(self) -> None:
        if not Environment.DRIVER.EVENT_LOOP_HEALTH_ENABLED:
            return

        interval_sec = Environment.DRIVER.EVENT_LOOP_HEALTH_INTERVAL
        threshold_ns = (
            Environment.DRIVER.EVENT_LOOP_HEALTH_WARN_THRESHOLD_MS * NANOS_PER_MILLIS
        )
        expected_ns = round(interval_sec * NANOS_PER_SECOND)

        while not self._stop_requested:
            start_perf_ns = time.perf_counter_ns()
            await asyncio.sleep(interval_sec)
            elapsed_ns = time.perf_counter_ns() - start_perf_ns
            delta_ns = elapsed_ns - expected_ns
            if self.is_trace_enabled:
                self.trace(
                    f"Event loop health check: expected {interval_sec * MILLIS_PER_SECOND:.1f}ms, actual {elapsed_ns / NANOS_PER_MILLIS:.2f}ms, delta {delta_ns / NANOS_PER_MILLIS:.2f}ms"
                )
            if delta_ns > threshold_ns:
                lag_ms = delta_ns / NANOS_PER_MILLIS
                self.stall_count += 1
                self.max_lag_ms = max(self.max_lag_ms, lag_ms)
                self.warning(
                    f"Event loop for {self._name} is taking too long to run, latencies may be inflated. Overhead: {lag_ms:,.2f}ms"
                )
                if self._callback is not None:
                    await self._callback(lag_ms)
