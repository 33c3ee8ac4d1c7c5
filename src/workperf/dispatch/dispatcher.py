# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Single entry point for sending one work request over REST or gRPC."""

import time

from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

from workperf.common.constants import NANOS_PER_MILLIS
from workperf.common.enums import Protocol
from workperf.common.logging import LoggerMixin
from workperf.common.models import RequestOutcome
from workperf.dispatch.grpc_client import GrpcTransport
from workperf.dispatch.rest import RestTransport
from workperf.dispatch.targets import BackendTable, resolve_endpoint
from workperf.telemetry import get_tracer, grpc_metadata_setter, inject_trace_context


class Dispatcher(LoggerMixin):
    """Performs work request round trips and reports them as `RequestOutcome`.

    Both protocols share the same timing, tracing and error contract and only
    differ in addressing and encoding, so there is one `dispatch` method that
    switches on the protocol instead of a class per protocol.

    Use as an async context manager so pooled connections are closed:

        async with Dispatcher() as dispatcher:
            outcome = await dispatcher.dispatch("net10", Protocol.GRPC, 4096, "abc")
    """

    def __init__(
        self,
        backends: BackendTable | None = None,
        tracer: trace.Tracer | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._backends = backends
        self._tracer = tracer or get_tracer()
        self._rest = RestTransport()
        self._grpc = GrpcTransport()

    async def __aenter__(self) -> "Dispatcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            await self._rest.close()
        finally:
            await self._grpc.close()

    def check_target(self, backend: str, protocol: Protocol) -> None:
        """Resolve the endpoint without sending anything.

        Raises:
            ConfigurationError: If the backend is unknown or does not serve the protocol.
        """
        resolve_endpoint(backend, Protocol(protocol), self._backends)

    async def dispatch(
        self,
        backend: str,
        protocol: Protocol,
        payload_size: int,
        correlation_id: str,
    ) -> RequestOutcome:
        """Send one work request and time it.

        Never raises for transport errors or non-success statuses: those come back
        as `succeeded=False` with the time elapsed until the failure.

        Raises:
            ConfigurationError: If the backend does not serve the protocol. The
                load driver calls `check_target` before starting any worker, so
                this only reaches callers that dispatch directly.
        """
        protocol = Protocol(protocol)
        address = resolve_endpoint(backend, protocol, self._backends)

        with self._tracer.start_as_current_span(
            "BffRequest",
            kind=SpanKind.CLIENT,
            attributes={
                "backend": backend,
                "protocol": str(protocol),
                # Correlation ids go on traces only, never on metrics.
                "correlationId": correlation_id,
            },
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            start_ns = time.perf_counter_ns()
            try:
                match protocol:
                    case Protocol.REST:
                        headers: dict[str, str] = {}
                        inject_trace_context(headers)
                        await self._rest.send(address, payload_size, correlation_id, headers)
                    case Protocol.GRPC:
                        metadata: list[tuple[str, str]] = []
                        inject_trace_context(metadata, setter=grpc_metadata_setter)
                        await self._grpc.send(address, payload_size, correlation_id, metadata)
            except Exception as e:
                elapsed_ms = (time.perf_counter_ns() - start_ns) / NANOS_PER_MILLIS
                error = f"{type(e).__name__}: {e}"
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, error))
                if self.is_debug_enabled:
                    self.debug(
                        f"Request {correlation_id} to {backend} over {protocol} failed "
                        f"after {elapsed_ms:.2f}ms: {error}"
                    )
                return RequestOutcome(
                    correlation_id=correlation_id,
                    elapsed_millis=elapsed_ms,
                    succeeded=False,
                    error=error,
                )

            elapsed_ms = (time.perf_counter_ns() - start_ns) / NANOS_PER_MILLIS
            if self.is_trace_enabled:
                self.trace(f"Request {correlation_id} completed in {elapsed_ms:.2f}ms")
            return RequestOutcome(
                correlation_id=correlation_id,
                elapsed_millis=elapsed_ms,
                succeeded=True,
            )
