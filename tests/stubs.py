# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Dispatcher stand-ins used by driver tests."""

import asyncio
import time

from workperf.common.enums import Protocol
from workperf.common.models import RequestOutcome


class StubDispatcher:
    """Base for stand-ins that accept any backend and protocol."""

    def check_target(self, backend: str, protocol: Protocol) -> None:
        pass


class InstrumentedDispatcher(StubDispatcher):
    """Sleeps for a fixed latency and tracks how many requests are in flight."""

    def __init__(self, latency_sec: float = 0.0, fail_every: int = 0) -> None:
        self.latency_sec = latency_sec
        self.fail_every = fail_every
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = 0
        self.completed = 0
        self.calls: list[tuple[str, Protocol, int, str]] = []

    async def dispatch(
        self, backend: str, protocol: Protocol, payload_size: int, correlation_id: str
    ) -> RequestOutcome:
        self.calls.append((backend, protocol, payload_size, correlation_id))
        self.started += 1
        index = self.started
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.latency_sec)
        finally:
            self.in_flight -= 1
        self.completed += 1
        succeeded = not (self.fail_every and index % self.fail_every == 0)
        return RequestOutcome(
            correlation_id=correlation_id,
            elapsed_millis=self.latency_sec * 1000,
            succeeded=succeeded,
            error=None if succeeded else "stub failure",
        )


class AlwaysFailDispatcher(StubDispatcher):
    def __init__(self) -> None:
        self.calls = 0

    async def dispatch(
        self, backend: str, protocol: Protocol, payload_size: int, correlation_id: str
    ) -> RequestOutcome:
        self.calls += 1
        await asyncio.sleep(0)
        return RequestOutcome(
            correlation_id=correlation_id,
            elapsed_millis=1.0,
            succeeded=False,
            error="ConnectionRefusedError: stub",
        )


class StartTimeDispatcher(StubDispatcher):
    """Zero-latency dispatcher whose reported latency is the request start time in ms
    relative to `origin`, so tests can tell which phase a sample came from."""

    def __init__(self) -> None:
        self.origin = time.perf_counter()

    async def dispatch(
        self, backend: str, protocol: Protocol, payload_size: int, correlation_id: str
    ) -> RequestOutcome:
        started_ms = (time.perf_counter() - self.origin) * 1000
        return RequestOutcome(
            correlation_id=correlation_id, elapsed_millis=started_ms, succeeded=True
        )


class RaisingDispatcher(StubDispatcher):
    """Violates the dispatcher contract by raising, simulating a broken worker."""

    async def dispatch(
        self, backend: str, protocol: Protocol, payload_size: int, correlation_id: str
    ) -> RequestOutcome:
        raise RuntimeError("dispatcher exploded")


class RaiseFirstDispatcher(StubDispatcher):
    """Raises on the first request; every other request sleeps, then succeeds.

    Keeps the task of every call so tests can check none is left running.
    """

    def __init__(self, latency_sec: float = 0.5) -> None:
        self.latency_sec = latency_sec
        self.tasks: list[asyncio.Task] = []

    async def dispatch(
        self, backend: str, protocol: Protocol, payload_size: int, correlation_id: str
    ) -> RequestOutcome:
        self.tasks.append(asyncio.current_task())
        if len(self.tasks) == 1:
            await asyncio.sleep(0)
            raise RuntimeError("first request exploded")
        await asyncio.sleep(self.latency_sec)
        return RequestOutcome(
            correlation_id=correlation_id, elapsed_millis=1.0, succeeded=True
        )
