# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Opt-in garbage collector counters for the load driver and the target service.

Collector pauses show up as latency outliers, so when a run has a suspicious
tail it helps to know whether the collector ran. Enable with
`WORKPERF_DIAGNOSTICS_GC_COUNTERS=true`.
"""

import asyncio
import gc
import time

from workperf.common.environment import Environment
from workperf.common.logging import LoggerMixin


class GcCounterMonitor(LoggerMixin):
    """Logs GC counters every `Environment.DIAGNOSTICS.GC_COUNTERS_INTERVAL` seconds.

    Counters, all per interval except the pending gauges:
    - gen-N-gc-count: collections of generation N
    - gc-collected / gc-uncollectable: objects found by the collector
    - time-in-gc: percent of wall clock spent inside collections
    - gen-N-pending: current allocation counters from `gc.get_count()`
    """

    def __init__(self, prefix: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._prefix = prefix
        self._task: asyncio.Task | None = None
        self._gc_started_ns: int | None = None
        self._gc_time_ns = 0
        self._last_stats = gc.get_stats()
        self._last_gc_time_ns = 0
        self._last_sample_ns = time.perf_counter_ns()

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Register the GC callback and start logging. No-op when disabled or already running."""
        if not Environment.DIAGNOSTICS.GC_COUNTERS or self._task is not None:
            return
        gc.callbacks.append(self._on_gc)
        self._last_stats = gc.get_stats()
        self._last_gc_time_ns = self._gc_time_ns
        self._last_sample_ns = time.perf_counter_ns()
        self._task = asyncio.create_task(self._report_loop())

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        if self._on_gc in gc.callbacks:
            gc.callbacks.remove(self._on_gc)

    def _on_gc(self, phase: str, info: dict) -> None:
        if phase == "start":
            self._gc_started_ns = time.perf_counter_ns()
        elif self._gc_started_ns is not None:
            self._gc_time_ns += time.perf_counter_ns() - self._gc_started_ns
            self._gc_started_ns = None

    def sample(self) -> dict[str, float]:
        """Return the counters accumulated since the previous sample (or `start`)."""
        now_ns = time.perf_counter_ns()
        stats = gc.get_stats()
        counters: dict[str, float] = {}
        for generation, (current, previous) in enumerate(zip(stats, self._last_stats)):
            counters[f"gen-{generation}-gc-count"] = (
                current["collections"] - previous["collections"]
            )
        for key in ("collected", "uncollectable"):
            counters[f"gc-{key}"] = sum(s[key] for s in stats) - sum(
                s[key] for s in self._last_stats
            )

        elapsed_ns = now_ns - self._last_sample_ns
        gc_time_ns = self._gc_time_ns - self._last_gc_time_ns
        counters["time-in-gc"] = (
            round(100 * gc_time_ns / elapsed_ns, 3) if elapsed_ns > 0 else 0.0
        )
        for generation, pending in enumerate(gc.get_count()):
            counters[f"gen-{generation}-pending"] = pending

        self._last_stats = stats
        self._last_gc_time_ns = self._gc_time_ns
        self._last_sample_ns = now_ns
        return counters

    async def _report_loop(self) -> None:
        interval_sec = Environment.DIAGNOSTICS.GC_COUNTERS_INTERVAL
        while True:
            await asyncio.sleep(interval_sec)
            counters = self.sample()
            self.info(
                f"{self._prefix} "
                + ", ".join(f"{name}: {value}" for name, value in counters.items())
            )
