# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from enum import Enum


class CaseInsensitiveStrEnum(str, Enum):
    """String enum that matches its values case-insensitively (e.g. from the CLI)."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class Protocol(CaseInsensitiveStrEnum):
    """Wire protocol used to reach the work service."""

    REST = "rest"
    GRPC = "grpc"


class ExecutionMode(CaseInsensitiveStrEnum):
    FIXED_COUNT = "fixed_count"
    FIXED_DURATION = "fixed_duration"


class RunPhase(CaseInsensitiveStrEnum):
    """Phase of a load run. Only PROFILING samples are reported."""

    WARMUP = "warmup"
    PROFILING = "profiling"


class OtlpProtocol(CaseInsensitiveStrEnum):
    HTTP_PROTOBUF = "http/protobuf"
    GRPC = "grpc"
