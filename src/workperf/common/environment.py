# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Process-level settings read from `WORKPERF_*` environment variables.

Usage:
    from workperf.common.environment import Environment

    if Environment.TELEMETRY.ENABLED:
        ...

Nested settings groups:
    Environment.DRIVER       WORKPERF_DRIVER_*       load driver tuning
    Environment.DIAGNOSTICS  WORKPERF_DIAGNOSTICS_*  GC counters
    Environment.TARGET       WORKPERF_TARGET_*       backend endpoint table
    Environment.TELEMETRY    WORKPERF_TELEMETRY_*    OpenTelemetry export
    Environment.SERVER       WORKPERF_SERVER_*       reference target service
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workperf.common.enums import OtlpProtocol, Protocol

__all__ = ["Environment"]


class _DriverSettings(BaseSettings):
    """Load driver tuning."""

    model_config = SettingsConfigDict(env_prefix="WORKPERF_DRIVER_")

    EVENT_LOOP_HEALTH_ENABLED: bool = Field(
        default=True,
        description="Log a warning when the event loop is blocked while a run is in progress",
    )
    EVENT_LOOP_HEALTH_INTERVAL: float = Field(
        default=0.25, gt=0, description="Event loop health check interval in seconds"
    )
    EVENT_LOOP_HEALTH_WARN_THRESHOLD_MS: float = Field(
        default=10.0,
        gt=0,
        description="Event loop lag in milliseconds above which a warning is logged",
    )
    HTTP_TIMEOUT: float = Field(
        default=100.0,
        gt=0,
        description="Total timeout in seconds for a single REST request",
    )
    HTTP_CONNECTION_LIMIT: int = Field(
        default=0,
        ge=0,
        description="Maximum number of pooled HTTP connections (0 means unlimited)",
    )


class _TargetSettings(BaseSettings):
    """Endpoint table mapping a backend name to the address served for each protocol."""

    model_config = SettingsConfigDict(env_prefix="WORKPERF_TARGET_")

    BACKENDS: dict[str, dict[Protocol, str]] = Field(
        default_factory=lambda: {
            "framework": {Protocol.REST: "http://localhost:5001"},
            "net10": {
                Protocol.REST: "http://localhost:6001",
                Protocol.GRPC: "localhost:6002",
            },
        },
        description="JSON object of backend name -> {protocol: address}. "
        "REST addresses are base URLs, gRPC addresses are host:port",
    )
    GRPC_MAX_MESSAGE_LENGTH: int = Field(
        default=50 * 1024 * 1024,
        gt=0,
        description="Maximum gRPC send/receive message size in bytes",
    )


class _TelemetrySettings(BaseSettings):
    """OpenTelemetry bootstrap."""

    model_config = SettingsConfigDict(env_prefix="WORKPERF_TELEMETRY_")

    ENABLED: bool = Field(
        default=False, description="Install OpenTelemetry SDK providers and exporters"
    )
    SERVICE_NAME: str = Field(
        default="Bff.Runner", description="service.name resource attribute of the load driver"
    )
    OTLP_ENDPOINT: str = Field(
        default="http://localhost:18890", description="OTLP collector endpoint"
    )
    OTLP_PROTOCOL: OtlpProtocol = Field(
        default=OtlpProtocol.HTTP_PROTOBUF, description="OTLP protocol: http/protobuf or grpc"
    )
    METRIC_EXPORT_INTERVAL_MS: int = Field(
        default=5000, gt=0, description="Periodic metric export interval in milliseconds"
    )
    CONSOLE_METRICS: bool = Field(
        default=False, description="Also print metrics to the console for local debugging"
    )
    SYSTEM_NAME: str = Field(default="OnlineSalesMotorSE")
    SYSTEM_CODE: str = Field(default="MOTOR")
    DEPLOYMENT_ENVIRONMENT: str = Field(default="local")


class _ServerSettings(BaseSettings):
    """Reference target service."""

    model_config = SettingsConfigDict(env_prefix="WORKPERF_SERVER_")

    HOST: str = Field(default="127.0.0.1", description="Interface to bind")
    REST_PORT: int = Field(default=6001, ge=0, le=65535)
    GRPC_PORT: int = Field(
        default=6002, ge=0, le=65535, description="gRPC port (0 disables the gRPC server)"
    )
    SERVICE_NAME: str = Field(default="Api.Net10")


class _DiagnosticsSettings(BaseSettings):
    """Optional runtime diagnostics for the driver and the target service."""

    model_config = SettingsConfigDict(env_prefix="WORKPERF_DIAGNOSTICS_")

    GC_COUNTERS: bool = Field(
        default=False,
        description="Periodically log garbage collector counters (collections per generation, "
        "objects collected, time spent in GC)",
    )
    GC_COUNTERS_INTERVAL: float = Field(
        default=5.0, gt=0, description="GC counter logging interval in seconds"
    )


class _Environment:
    DRIVER = _DriverSettings()
    DIAGNOSTICS = _DiagnosticsSettings()
    TARGET = _TargetSettings()
    TELEMETRY = _TelemetrySettings()
    SERVER = _ServerSettings()


Environment = _Environment()
