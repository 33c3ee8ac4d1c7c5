# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from pathlib import Path
from typing import Annotated, Literal

from cyclopts import Parameter
from pydantic import BaseModel, Field, model_validator

from workperf.common.config.run_config import FixedCount, FixedDuration, RunConfig
from workperf.common.enums import Protocol
from workperf.dispatch.targets import resolve_endpoint

logger = logging.getLogger(__name__)

_LOAD_GROUP = "Load Generator"
_TARGET_GROUP = "Target"
_OUTPUT_GROUP = "Output"


class LoadConfig(BaseModel):
    """Command line settings for a load run, converted into a `RunConfig` by `to_run_config`."""

    iterations: Annotated[
        int,
        Field(
            description="Number of requests to send in count mode. "
            "Ignored when --durationSeconds is greater than 0.",
        ),
        Parameter(name=("--iterations",), group=_LOAD_GROUP),
    ] = 100

    concurrency: Annotated[
        int,
        Field(
            ge=1,
            description="Maximum number of requests in flight at once. In duration mode this is "
            "the number of worker loops, each keeping one request in flight.",
        ),
        Parameter(name=("--concurrency",), group=_LOAD_GROUP),
    ] = 10

    duration_seconds: Annotated[
        float,
        Field(
            ge=0,
            description="Run for this many seconds instead of a fixed number of iterations. "
            "Any value greater than 0 selects duration mode.",
        ),
        Parameter(name=("--durationSeconds", "--duration-seconds"), group=_LOAD_GROUP),
    ] = 0

    warmup_seconds: Annotated[
        float,
        Field(
            ge=0,
            description="Warm-up period in seconds before measuring (duration mode only). "
            "Latencies from the warm-up are discarded.",
        ),
        Parameter(name=("--warmupSeconds", "--warmup-seconds"), group=_LOAD_GROUP),
    ] = 0

    backend: Annotated[
        str,
        Field(
            min_length=1,
            description="Target deployment. Selects the endpoint from WORKPERF_TARGET_BACKENDS "
            "(defaults: framework, net10).",
        ),
        Parameter(name=("--backend",), group=_TARGET_GROUP),
    ] = "framework"

    protocol: Annotated[
        Protocol,
        Field(description="Wire protocol: rest or grpc."),
        Parameter(name=("--protocol",), group=_TARGET_GROUP),
    ] = Protocol.REST

    payload: Annotated[
        int,
        Field(
            ge=0,
            description="Size in bytes of the synthetic payload the target generates per request.",
        ),
        Parameter(name=("--payload",), group=_TARGET_GROUP),
    ] = 4096

    output_file: Annotated[
        Path | None,
        Field(description="Write the run result as JSON to this file."),
        Parameter(name=("--output-file",), group=_OUTPUT_GROUP),
    ] = None

    log_level: Annotated[
        Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        Field(description="Console log level."),
        Parameter(name=("--log-level",), group=_OUTPUT_GROUP),
    ] = "INFO"

    @property
    def is_duration_mode(self) -> bool:
        return self.duration_seconds > 0

    @model_validator(mode="after")
    def validate_mode(self) -> "LoadConfig":
        """Validate the settings that apply to the selected mode.

        Raises:
            ValueError: If iterations < 1 in count mode.
        """
        if self.is_duration_mode:
            return self

        if self.iterations < 1:
            raise ValueError(
                f"Invalid iterations value: {self.iterations}. "
                "Count mode needs at least 1 iteration. "
                "Use --iterations 1 or higher, or --durationSeconds N for duration mode."
            )
        return self

    def to_run_config(self) -> RunConfig:
        """Build the immutable run configuration.

        Raises:
            ConfigurationError: If the backend is unknown or does not serve the protocol
                (e.g. gRPC is only served by the net10 backend by default).
        """
        resolve_endpoint(self.backend, self.protocol)
        if self.is_duration_mode:
            mode = FixedDuration(
                duration_seconds=self.duration_seconds,
                warmup_seconds=self.warmup_seconds,
            )
        else:
            if self.warmup_seconds > 0:
                logger.warning(
                    f"Ignoring --warmupSeconds {self.warmup_seconds:g}: warm-up only applies "
                    "in duration mode (--durationSeconds N)"
                )
            mode = FixedCount(iterations=self.iterations)
        return RunConfig(
            concurrency=self.concurrency,
            mode=mode,
            protocol=self.protocol,
            backend=self.backend,
            payload_size=self.payload,
        )
