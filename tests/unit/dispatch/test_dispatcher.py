# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Dispatcher tests against the in-process reference server and small aiohttp apps."""

import socket
from unittest.mock import patch

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanKind, StatusCode

from workperf.common.config import FixedCount, RunConfig
from workperf.common.constants import WORK_API_PATH
from workperf.common.enums import Protocol
from workperf.common.exceptions import ConfigurationError
from workperf.dispatch import Dispatcher, WorkDispatcherProtocol
from workperf.driver import LoadDriver
from workperf.server import WorkServer
from workperf.telemetry import extract_trace_context

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("workperf.tests")


@pytest_asyncio.fixture
async def work_server():
    server = WorkServer(host="127.0.0.1", rest_port=0, grpc_port=0)
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def local_backends(work_server):
    return {
        "local": {
            Protocol.REST: f"http://127.0.0.1:{work_server.rest_port}",
            Protocol.GRPC: f"127.0.0.1:{work_server.grpc_port}",
        }
    }


@pytest_asyncio.fixture
async def capture_server():
    """aiohttp server that records request headers and answers with a configurable status."""
    state = {"headers": [], "status": 200}

    async def handler(request: web.Request) -> web.Response:
        state["headers"].append(dict(request.headers))
        return web.json_response({"bigString": ""}, status=state["status"])

    app = web.Application()
    app.router.add_post(WORK_API_PATH, handler)
    server = TestServer(app, host="127.0.0.1")
    await server.start_server()
    state["url"] = f"http://127.0.0.1:{server.port}"
    yield state
    await server.close()


# -----------------------------------------------------------------------------
# Tests
# -----------------------------------------------------------------------------


class TestDispatcherContract:
    def test_satisfies_protocol(self):
        assert isinstance(Dispatcher(), WorkDispatcherProtocol)

    @pytest.mark.asyncio
    async def test_unsupported_protocol_raises(self):
        async with Dispatcher() as dispatcher:
            with pytest.raises(ConfigurationError):
                await dispatcher.dispatch("framework", Protocol.GRPC, 10, "cid")

    def test_check_target_uses_configured_table(self):
        dispatcher = Dispatcher(backends={"local": {Protocol.GRPC: "127.0.0.1:1"}})
        dispatcher.check_target("local", Protocol.GRPC)
        dispatcher.check_target("local", "grpc")
        with pytest.raises(ConfigurationError, match="not supported with backend=local"):
            dispatcher.check_target("local", Protocol.REST)


class TestRestDispatch:
    @pytest.mark.asyncio
    async def test_success_against_reference_server(self, local_backends):
        async with Dispatcher(backends=local_backends) as dispatcher:
            outcome = await dispatcher.dispatch("local", Protocol.REST, 256, "cid-1")

        assert outcome.succeeded
        assert outcome.error is None
        assert outcome.correlation_id == "cid-1"
        assert outcome.elapsed_millis > 0

    @pytest.mark.asyncio
    async def test_server_error_is_a_failed_outcome(self, capture_server, tracer, span_exporter):
        capture_server["status"] = 500
        backends = {"capture": {Protocol.REST: capture_server["url"]}}
        async with Dispatcher(backends=backends, tracer=tracer) as dispatcher:
            outcome = await dispatcher.dispatch("capture", Protocol.REST, 1, "cid-500")

        assert not outcome.succeeded
        assert "500" in outcome.error
        assert outcome.elapsed_millis >= 0
        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR

    @pytest.mark.asyncio
    async def test_connection_refused_is_a_failed_outcome(self):
        backends = {"down": {Protocol.REST: f"http://127.0.0.1:{_unused_port()}"}}
        async with Dispatcher(backends=backends) as dispatcher:
            outcome = await dispatcher.dispatch("down", Protocol.REST, 1, "cid-down")

        assert not outcome.succeeded
        assert outcome.error

    @pytest.mark.asyncio
    async def test_injects_trace_context_header(self, capture_server, tracer, span_exporter):
        backends = {"capture": {Protocol.REST: capture_server["url"]}}
        async with Dispatcher(backends=backends, tracer=tracer) as dispatcher:
            outcome = await dispatcher.dispatch("capture", Protocol.REST, 64, "cid-trace")

        assert outcome.succeeded
        (span,) = span_exporter.get_finished_spans()
        assert span.name == "BffRequest"
        assert span.kind == SpanKind.CLIENT
        assert span.attributes["backend"] == "capture"
        assert span.attributes["protocol"] == "rest"
        assert span.attributes["correlationId"] == "cid-trace"

        (headers,) = capture_server["headers"]
        traceparent = headers["traceparent"]
        assert format(span.context.trace_id, "032x") in traceparent
        assert format(span.context.span_id, "016x") in traceparent


class TestGrpcDispatch:
    @pytest.mark.asyncio
    async def test_success_against_reference_server(self, local_backends, tracer, span_exporter):
        async with Dispatcher(backends=local_backends, tracer=tracer) as dispatcher:
            outcome = await dispatcher.dispatch("local", Protocol.GRPC, 1024, "cid-grpc")

        assert outcome.succeeded
        assert outcome.correlation_id == "cid-grpc"
        (span,) = span_exporter.get_finished_spans()
        assert span.attributes["protocol"] == "grpc"

    @pytest.mark.asyncio
    async def test_injects_trace_context_metadata(self, local_backends, tracer, span_exporter):
        with patch(
            "workperf.server.grpc_service.extract_trace_context",
            wraps=extract_trace_context,
        ) as server_extract:
            async with Dispatcher(backends=local_backends, tracer=tracer) as dispatcher:
                outcome = await dispatcher.dispatch("local", Protocol.GRPC, 16, "cid-meta")

        assert outcome.succeeded
        (span,) = span_exporter.get_finished_spans()
        (carrier,), _ = server_extract.call_args
        traceparent = carrier["traceparent"]
        assert format(span.context.trace_id, "032x") in traceparent
        assert format(span.context.span_id, "016x") in traceparent

    @pytest.mark.asyncio
    async def test_unreachable_target_is_a_failed_outcome(self):
        backends = {"down": {Protocol.GRPC: f"127.0.0.1:{_unused_port()}"}}
        async with Dispatcher(backends=backends) as dispatcher:
            outcome = await dispatcher.dispatch("down", Protocol.GRPC, 1, "cid-down")

        assert not outcome.succeeded
        assert "AioRpcError" in outcome.error


class TestEndToEnd:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("protocol", [Protocol.REST, Protocol.GRPC])
    async def test_count_run_against_reference_server(
        self, local_backends, latency_recorder, protocol
    ):
        config = RunConfig(
            concurrency=4,
            mode=FixedCount(iterations=20),
            protocol=protocol,
            backend="local",
            payload_size=512,
        )
        async with Dispatcher(backends=local_backends) as dispatcher:
            result = await LoadDriver(dispatcher, latency_recorder=latency_recorder).run(config)

        assert result.count == 20
        assert result.failure_count == 0
        assert 0 < result.p50_ms <= result.p95_ms <= result.p99_ms
