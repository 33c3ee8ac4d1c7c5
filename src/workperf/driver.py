# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Load driver: worker pool, admission gate and the fixed-count / fixed-duration state machines."""

import asyncio
import time
import uuid

from workperf.aggregator import LatencyAggregator
from workperf.common.config import FixedCount, FixedDuration, RunConfig
from workperf.common.constants import NANOS_PER_SECOND
from workperf.common.enums import RunPhase
from workperf.common.environment import Environment
from workperf.common.event_loop_monitor import EventLoopMonitor
from workperf.common.exceptions import FatalRunError
from workperf.common.gc_monitor import GcCounterMonitor
from workperf.common.logging import LoggerMixin
from workperf.common.models import RequestOutcome, RunResult
from workperf.dispatch.protocols import WorkDispatcherProtocol
from workperf.telemetry import LatencyRecorder

__all__ = [
    "LoadDriver",
    "run_load",
]


def _new_correlation_id() -> str:
    return uuid.uuid4().hex


class LoadDriver(LoggerMixin):
    """Drives concurrent work requests through a dispatcher and aggregates latencies.

    FixedCount mode (Dispatching -> Draining -> Done):
        Exactly `iterations` requests are scheduled. A semaphore sized to
        `concurrency` is acquired before each request is created and released
        when it completes, so at most `concurrency` requests are ever in flight.

    FixedDuration mode (Warmup -> Measuring -> Draining -> Done):
        `concurrency` worker loops each keep one request in flight. Warm-up
        samples are collected into a throw-away phase and discarded. When the
        measured timer elapses a stop event is set; each worker finishes its
        current request and exits, and the driver waits for all of them.

    Per-request failures are counted but never stop the run and are never retried.
    """

    def __init__(
        self,
        dispatcher: WorkDispatcherProtocol,
        aggregator: LatencyAggregator | None = None,
        latency_recorder: LatencyRecorder | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.dispatcher = dispatcher
        self.aggregator = aggregator or LatencyAggregator()
        self._injected_recorder = latency_recorder
        self._latency_recorder: LatencyRecorder | None = None
        self._phase = RunPhase.PROFILING
        self.warmup_result: RunResult | None = None

    async def run(self, config: RunConfig) -> RunResult:
        """Run one load test and return statistics for the measured phase.

        Raises:
            ConfigurationError: If the dispatcher cannot reach `config.backend` over
                `config.protocol`. Raised before any worker starts.
            FatalRunError: If the worker pool, admission gate or timers fail.
        """
        self.dispatcher.check_target(config.backend, config.protocol)
        self.info(
            f"Starting {config.mode.kind} run: backend={config.backend} protocol={config.protocol} "
            f"concurrency={config.concurrency} payload={config.payload_size}"
        )
        # Histogram tags follow the run, so a reused driver never mislabels samples.
        self._latency_recorder = self._injected_recorder or LatencyRecorder(
            config.backend, str(config.protocol)
        )

        monitor = EventLoopMonitor(name="load driver")
        gc_monitor = GcCounterMonitor(prefix=Environment.TELEMETRY.SERVICE_NAME)
        monitor.start()
        gc_monitor.start()
        try:
            match config.mode:
                case FixedCount():
                    result = await self._run_fixed_count(config, config.mode)
                case FixedDuration():
                    result = await self._run_fixed_duration(config, config.mode)
        except FatalRunError:
            raise
        except Exception as e:
            raise FatalRunError(f"Load run aborted: {e!r}") from e
        finally:
            monitor.stop()
            gc_monitor.stop()

        if result.failure_count:
            self.warning(
                f"{result.failure_count} request(s) failed and were excluded from latency statistics"
            )
        self.info(
            f"Run complete: {result.count} successful request(s) in {result.total_wall_clock_sec:.3f}s"
        )
        return result

    async def _dispatch_one(self, config: RunConfig) -> RequestOutcome:
        return await self.dispatcher.dispatch(
            config.backend,
            config.protocol,
            config.payload_size,
            _new_correlation_id(),
        )

    def _record(self, outcome: RequestOutcome) -> None:
        if outcome.succeeded:
            self.aggregator.record(outcome.elapsed_millis)
            if self._phase == RunPhase.PROFILING:
                self._latency_recorder.record(outcome.elapsed_millis)
        else:
            self.aggregator.record_failure()

    async def _run_fixed_count(self, config: RunConfig, mode: FixedCount) -> RunResult:
        gate = asyncio.Semaphore(config.concurrency)
        in_flight: set[asyncio.Task] = set()
        self._phase = RunPhase.PROFILING
        self.aggregator.reset()
        start_ns = time.perf_counter_ns()

        async def _work_item() -> None:
            try:
                self._record(await self._dispatch_one(config))
            finally:
                gate.release()

        errors: list[BaseException] = []

        def _on_done(task: asyncio.Task) -> None:
            in_flight.discard(task)
            if not task.cancelled() and task.exception() is not None:
                errors.append(task.exception())

        try:
            for _ in range(mode.iterations):
                await gate.acquire()
                if errors:
                    gate.release()
                    break
                task = asyncio.create_task(_work_item())
                in_flight.add(task)
                task.add_done_callback(_on_done)

            self.debug(f"Scheduling finished, draining {len(in_flight)} request(s)")
            await asyncio.gather(*in_flight)
            if errors:
                raise errors[0]
        except BaseException:
            pending = list(in_flight)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise

        elapsed_sec = (time.perf_counter_ns() - start_ns) / NANOS_PER_SECOND
        return self.aggregator.snapshot(elapsed_sec)

    async def _run_fixed_duration(self, config: RunConfig, mode: FixedDuration) -> RunResult:
        stop_event = asyncio.Event()
        self._phase = RunPhase.WARMUP if mode.warmup_seconds > 0 else RunPhase.PROFILING
        self.aggregator.reset()
        workers = [
            asyncio.create_task(self._worker_loop(config, stop_event), name=f"worker-{i}")
            for i in range(config.concurrency)
        ]

        try:
            if self._phase == RunPhase.WARMUP:
                self.info(f"Warming up for {mode.warmup_seconds}s")
                await self._sleep_while_workers_run(mode.warmup_seconds, workers)
                # No await between the phase switch and the reset, so no sample can slip in.
                self._phase = RunPhase.PROFILING
                self.warmup_result = self.aggregator.snapshot()
                self.aggregator.reset()
                self.debug(
                    f"Warm-up finished with {self.warmup_result.count} discarded sample(s)"
                )

            self.info(f"Measuring for {mode.duration_seconds}s")
            start_ns = time.perf_counter_ns()
            await self._sleep_while_workers_run(mode.duration_seconds, workers)
            stop_event.set()
            self.debug("Duration elapsed, waiting for in-flight requests to finish")
            await asyncio.gather(*workers)
        except BaseException:
            stop_event.set()
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

        elapsed_sec = (time.perf_counter_ns() - start_ns) / NANOS_PER_SECOND
        return self.aggregator.snapshot(elapsed_sec)

    async def _sleep_while_workers_run(
        self, seconds: float, workers: list[asyncio.Task]
    ) -> None:
        """Sleep for `seconds`, failing early if a worker dies unexpectedly."""
        done, _ = await asyncio.wait(
            workers, timeout=seconds, return_when=asyncio.FIRST_EXCEPTION
        )
        for worker in done:
            if not worker.cancelled() and worker.exception() is not None:
                raise worker.exception()

    async def _worker_loop(self, config: RunConfig, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            started_in = self._phase
            outcome = await self._dispatch_one(config)
            # Requests that straddle the warm-up boundary belong to neither phase.
            if started_in == self._phase:
                self._record(outcome)
            # Yield so a dispatcher that never suspends cannot starve the phase timer.
            await asyncio.sleep(0)


def run_load(config: RunConfig, dispatcher: WorkDispatcherProtocol) -> RunResult:
    """Synchronous wrapper around `LoadDriver.run` for scripts and tests."""
    return asyncio.run(LoadDriver(dispatcher).run(config))
