# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the opt-in garbage collector counters."""

import asyncio
import gc
from unittest.mock import patch

import pytest

from workperf.common.environment import Environment
from workperf.common.gc_monitor import GcCounterMonitor


class _Node:
    def __init__(self) -> None:
        self.other = None


def _make_cycle() -> None:
    a, b = _Node(), _Node()
    a.other, b.other = b, a


@pytest.fixture
def gc_counters_enabled(monkeypatch):
    monkeypatch.setattr(Environment.DIAGNOSTICS, "GC_COUNTERS", True)
    monkeypatch.setattr(Environment.DIAGNOSTICS, "GC_COUNTERS_INTERVAL", 0.01)


class TestGcCounterMonitor:
    @pytest.mark.asyncio
    async def test_disabled_by_default(self):
        monitor = GcCounterMonitor(prefix="Bff.Runner")
        monitor.start()
        try:
            assert not monitor.is_running
            assert monitor._on_gc not in gc.callbacks
        finally:
            monitor.stop()

    @pytest.mark.asyncio
    async def test_start_and_stop_manage_callback(self, gc_counters_enabled):
        monitor = GcCounterMonitor(prefix="Bff.Runner")
        monitor.start()
        assert monitor.is_running
        assert monitor._on_gc in gc.callbacks

        monitor.stop()
        assert not monitor.is_running
        assert monitor._on_gc not in gc.callbacks

    @pytest.mark.asyncio
    async def test_start_twice_registers_once(self, gc_counters_enabled):
        monitor = GcCounterMonitor(prefix="Bff.Runner")
        monitor.start()
        monitor.start()
        try:
            assert gc.callbacks.count(monitor._on_gc) == 1
        finally:
            monitor.stop()

    @pytest.mark.asyncio
    async def test_sample_counts_full_collection(self, gc_counters_enabled):
        monitor = GcCounterMonitor(prefix="Bff.Runner")
        monitor.start()
        try:
            _make_cycle()
            gc.collect()
            counters = monitor.sample()
        finally:
            monitor.stop()

        assert counters["gen-2-gc-count"] >= 1
        assert counters["gc-collected"] >= 2
        assert counters["gc-uncollectable"] == 0
        assert counters["time-in-gc"] >= 0
        assert "gen-0-pending" in counters

    @pytest.mark.asyncio
    async def test_sample_is_a_delta(self, gc_counters_enabled):
        monitor = GcCounterMonitor(prefix="Bff.Runner")
        monitor.start()
        try:
            gc.collect()
            monitor.sample()
            second = monitor.sample()
        finally:
            monitor.stop()

        assert second["gen-2-gc-count"] == 0

    @pytest.mark.asyncio
    async def test_report_loop_logs_with_prefix(self, gc_counters_enabled):
        monitor = GcCounterMonitor(prefix="Bff.Server")
        with patch.object(monitor, "info") as mock_info:
            monitor.start()
            try:
                await asyncio.sleep(0.05)
            finally:
                monitor.stop()

        assert mock_info.called
        message = mock_info.call_args.args[0]
        assert message.startswith("Bff.Server ")
        assert "gen-0-gc-count" in message
        assert "time-in-gc" in message
