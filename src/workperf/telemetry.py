# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""OpenTelemetry wiring shared by the load driver and the reference target service.

The driver only ever calls three things from here: start a client span, inject
the span context into an outgoing carrier, and record a latency sample. Provider
bootstrap (`start_telemetry`) is optional; without it every call is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics, propagate, trace
from opentelemetry.context import Context
from opentelemetry.propagators.textmap import Setter, default_setter

from workperf.common.constants import (
    ACTIVITY_SOURCE_NAME,
    LATENCY_HISTOGRAM_NAME,
    METER_NAME,
)
from workperf.common.enums import OtlpProtocol
from workperf.common.environment import Environment

if TYPE_CHECKING:
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.trace import TracerProvider

logger = logging.getLogger(__name__)

__all__ = [
    "GrpcMetadataSetter",
    "LatencyRecorder",
    "TelemetryProviders",
    "extract_trace_context",
    "get_tracer",
    "inject_trace_context",
    "start_telemetry",
]


class GrpcMetadataSetter(Setter[list]):
    """Appends propagation fields to a gRPC metadata list of `(key, value)` tuples."""

    def set(self, carrier: list, key: str, value: str) -> None:
        carrier.append((key.lower(), value))


grpc_metadata_setter = GrpcMetadataSetter()


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(ACTIVITY_SOURCE_NAME)


def inject_trace_context(
    carrier: Any,
    setter: Setter = default_setter,
    context: Context | None = None,
) -> None:
    """Serialize the span context (current one by default) onto an outgoing carrier."""
    propagate.inject(carrier, context=context, setter=setter)


def extract_trace_context(carrier: MutableMapping[str, str]) -> Context:
    """Read the caller's span context from incoming headers or metadata."""
    return propagate.extract(carrier)


class LatencyRecorder:
    """Records one histogram sample per completed request.

    Only `backend` and `protocol` are attached as attributes. Correlation ids
    never go into metrics to keep cardinality bounded.
    """

    def __init__(self, backend: str, protocol: str, meter: metrics.Meter | None = None) -> None:
        meter = meter or metrics.get_meter(METER_NAME)
        self._histogram = meter.create_histogram(
            LATENCY_HISTOGRAM_NAME,
            unit="ms",
            description="Client-side latency of work requests",
        )
        self._attributes = {"backend": backend, "protocol": str(protocol)}

    def record(self, elapsed_millis: float) -> None:
        self._histogram.record(elapsed_millis, attributes=self._attributes)


@dataclass(slots=True)
class TelemetryProviders:
    """SDK providers installed by `start_telemetry`. Call `shutdown` to flush exporters."""

    tracer_provider: TracerProvider
    meter_provider: MeterProvider

    def shutdown(self) -> None:
        try:
            self.tracer_provider.shutdown()
        finally:
            self.meter_provider.shutdown()


def start_telemetry(service_name: str | None = None) -> TelemetryProviders | None:
    """Install global tracer and meter providers exporting over OTLP.

    Returns None when `WORKPERF_TELEMETRY_ENABLED` is false, leaving the
    no-op API providers in place.
    """
    settings = Environment.TELEMETRY
    if not settings.ENABLED:
        logger.debug("Telemetry disabled, using no-op providers")
        return None

    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.metrics.export import (
        ConsoleMetricExporter,
        PeriodicExportingMetricReader,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    resource = Resource.create(
        {
            "service.name": service_name or settings.SERVICE_NAME,
            "system.name": settings.SYSTEM_NAME,
            "system.code": settings.SYSTEM_CODE,
            "deployment.environment": settings.DEPLOYMENT_ENVIRONMENT,
        }
    )
    span_exporter, metric_exporter = _create_otlp_exporters(
        settings.OTLP_ENDPOINT, settings.OTLP_PROTOCOL
    )

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))

    readers = [
        PeriodicExportingMetricReader(
            metric_exporter,
            export_interval_millis=settings.METRIC_EXPORT_INTERVAL_MS,
        )
    ]
    if settings.CONSOLE_METRICS:
        readers.append(
            PeriodicExportingMetricReader(
                ConsoleMetricExporter(),
                export_interval_millis=settings.METRIC_EXPORT_INTERVAL_MS,
            )
        )
    meter_provider = MeterProvider(resource=resource, metric_readers=readers)

    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(meter_provider)
    logger.info(
        f"Telemetry exporting to {settings.OTLP_ENDPOINT} over {settings.OTLP_PROTOCOL}"
    )
    return TelemetryProviders(
        tracer_provider=tracer_provider, meter_provider=meter_provider
    )


def _create_otlp_exporters(endpoint: str, protocol: OtlpProtocol):
    endpoint = endpoint.rstrip("/")
    if protocol == OtlpProtocol.GRPC:
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
            OTLPMetricExporter,
        )
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        return (
            OTLPSpanExporter(endpoint=endpoint, insecure=True),
            OTLPMetricExporter(endpoint=endpoint, insecure=True),
        )

    from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
        OTLPMetricExporter,
    )
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    # The HTTP exporters do not append signal paths to an explicit endpoint.
    return (
        OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"),
        OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"),
    )
