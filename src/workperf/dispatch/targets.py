# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Backend name to endpoint resolution."""

from collections.abc import Mapping

from workperf.common.enums import Protocol
from workperf.common.environment import Environment
from workperf.common.exceptions import ConfigurationError

BackendTable = Mapping[str, Mapping[Protocol, str]]


def resolve_endpoint(
    backend: str, protocol: Protocol, backends: BackendTable | None = None
) -> str:
    """Return the address that serves `protocol` for `backend`.

    REST addresses are base URLs (``http://host:port``), gRPC addresses are ``host:port``.

    Raises:
        ConfigurationError: If the backend is unknown or does not serve the protocol.
    """
    backends = Environment.TARGET.BACKENDS if backends is None else backends
    endpoints = backends.get(backend)
    if endpoints is None:
        known = ", ".join(sorted(backends)) or "<none>"
        raise ConfigurationError(
            f"Unknown backend '{backend}'. Known backends: {known}. "
            "Add one with WORKPERF_TARGET_BACKENDS."
        )
    address = endpoints.get(Protocol(protocol))
    if not address:
        supported = sorted(str(p) for p in endpoints) or ["<none>"]
        raise ConfigurationError(
            f"Protocol '{protocol}' is not supported with backend={backend}. "
            f"Supported protocols for this backend: {', '.join(supported)}."
        )
    return address
