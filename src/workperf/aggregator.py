# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Thread-safe latency sample collection and nearest-rank percentile statistics."""

import math
import threading
import time
from collections.abc import Sequence

from workperf.common.constants import NANOS_PER_SECOND
from workperf.common.models import RunResult

__all__ = [
    "LatencyAggregator",
    "nearest_rank_percentile",
]


def nearest_rank_percentile(sorted_samples: Sequence[float], percentile: float) -> float:
    """Return the nearest-rank percentile of an ascending sequence.

    The rank is `ceil(percentile / 100 * n) - 1`, clamped to `[0, n - 1]`, so the
    result is always an actual sample. Returns 0.0 for an empty sequence.
    """
    n = len(sorted_samples)
    if n == 0:
        return 0.0
    index = math.ceil(percentile / 100 * n) - 1
    index = max(0, min(n - 1, index))
    return sorted_samples[index]


class LatencyAggregator:
    """Collects elapsed-time samples from many concurrent producers.

    `record` and `record_failure` may be called from any thread or task. The raw
    sample list is never handed out; `snapshot` works on a private sorted copy.

    Take the final snapshot only after every producer has stopped, otherwise
    requests still in flight are missing from the result.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._samples: list[float] = []
        self._failures = 0
        self._started_ns = time.perf_counter_ns()

    def record(self, elapsed_millis: float) -> None:
        """Add one successful request latency in milliseconds."""
        with self._lock:
            self._samples.append(elapsed_millis)

    def record_failure(self) -> None:
        """Count one failed request. Failures never contribute latency samples."""
        with self._lock:
            self._failures += 1

    def reset(self) -> None:
        """Discard all samples and failures and restart the phase clock."""
        with self._lock:
            self._samples = []
            self._failures = 0
            self._started_ns = time.perf_counter_ns()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._samples)

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failures

    def samples(self) -> list[float]:
        """Return a copy of the recorded samples in insertion order."""
        with self._lock:
            return list(self._samples)

    def snapshot(self, total_wall_clock_sec: float | None = None) -> RunResult:
        """Compute statistics over everything recorded since the last reset.

        Args:
            total_wall_clock_sec: Wall clock time of the phase. Defaults to the time
                elapsed since the last reset (or construction).

        Returns:
            RunResult with average, p50/p95/p99 and requests per second. All values
            are 0 when no samples were recorded.
        """
        with self._lock:
            frozen = list(self._samples)
            failures = self._failures
            started_ns = self._started_ns

        if total_wall_clock_sec is None:
            total_wall_clock_sec = (time.perf_counter_ns() - started_ns) / NANOS_PER_SECOND

        frozen.sort()
        count = len(frozen)
        if count == 0:
            return RunResult(
                count=0,
                failure_count=failures,
                total_wall_clock_sec=total_wall_clock_sec,
            )

        rps = count / total_wall_clock_sec if total_wall_clock_sec > 0 else 0.0
        return RunResult(
            count=count,
            failure_count=failures,
            total_wall_clock_sec=total_wall_clock_sec,
            average_ms=math.fsum(frozen) / count,
            p50_ms=nearest_rank_percentile(frozen, 50),
            p95_ms=nearest_rank_percentile(frozen, 95),
            p99_ms=nearest_rank_percentile(frozen, 99),
            requests_per_second=rps,
        )
