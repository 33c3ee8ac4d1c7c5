# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from workperf.common.enums import Protocol
from workperf.common.exceptions import ConfigurationError
from workperf.dispatch import resolve_endpoint


class TestResolveEndpoint:
    @pytest.mark.parametrize(
        ("backend", "protocol", "expected"),
        [
            ("framework", Protocol.REST, "http://localhost:5001"),
            ("net10", Protocol.REST, "http://localhost:6001"),
            ("net10", Protocol.GRPC, "localhost:6002"),
            ("net10", "GRPC", "localhost:6002"),
        ],
    )  # fmt: skip
    def test_default_table(self, backend, protocol, expected):
        assert resolve_endpoint(backend, protocol) == expected

    def test_grpc_not_served_by_framework(self):
        with pytest.raises(ConfigurationError, match="Supported protocols for this backend: rest"):
            resolve_endpoint("framework", Protocol.GRPC)

    def test_unknown_backend_lists_known(self):
        with pytest.raises(ConfigurationError, match="Known backends: framework, net10"):
            resolve_endpoint("java", Protocol.REST)

    def test_explicit_table(self):
        table = {"local": {Protocol.GRPC: "127.0.0.1:9000"}}
        assert resolve_endpoint("local", Protocol.GRPC, table) == "127.0.0.1:9000"
        with pytest.raises(ConfigurationError):
            resolve_endpoint("net10", Protocol.REST, table)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_endpoint("java", Protocol.REST)
