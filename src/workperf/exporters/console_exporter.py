# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Human-readable run summary."""

from rich.console import Console

from workperf.common.config import FixedDuration, RunConfig
from workperf.common.models import RunResult

NO_LATENCIES_MESSAGE = "No latencies recorded."


def format_run_summary(config: RunConfig, result: RunResult) -> list[str]:
    """Build the summary lines for a finished run.

    A run with zero successful requests yields a single line saying so,
    with the failure count appended when there were failures.
    """
    if not result.has_samples:
        lines = [NO_LATENCIES_MESSAGE]
        if result.failure_count:
            lines.append(f"Failed requests: {result.failure_count}")
        return lines

    lines = [f"Backend: {config.backend} | Protocol: {config.protocol}"]
    mode = config.mode
    if isinstance(mode, FixedDuration):
        lines.append(
            f"Duration: {mode.duration_seconds:g}s | Concurrency: {config.concurrency} | Payload: {config.payload_size}"
        )
        if mode.warmup_seconds > 0:
            lines.append(f"Warmup: {mode.warmup_seconds:g}s")
    else:
        lines.append(
            f"Iterations: {mode.iterations} | Concurrency: {config.concurrency} | Payload: {config.payload_size}"
        )
    lines.append(
        f"Total: {result.total_wall_clock_ms:.0f} ms | RPS: {result.requests_per_second:.2f}"
    )
    lines.append(
        f"Avg: {result.average_ms:.2f} ms | p50: {result.p50_ms:.2f} ms | "
        f"p95: {result.p95_ms:.2f} ms | p99: {result.p99_ms:.2f} ms"
    )
    if result.failure_count:
        lines.append(
            f"Failed requests: {result.failure_count} (excluded from latency statistics)"
        )
    return lines


class ConsoleExporter:
    """Prints the run summary to stdout."""

    def __init__(self, config: RunConfig, result: RunResult, console: Console | None = None) -> None:
        self._config = config
        self._result = result
        self._console = console or Console()

    def export(self) -> None:
        for line in format_run_summary(self._config, self._result):
            self._console.print(line, highlight=False, markup=False)
