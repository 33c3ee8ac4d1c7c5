# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Command line entry points: `workperf` (load driver) and `workperf-server` (reference target)."""

import sys
from typing import Annotated, Literal

from cyclopts import App, Parameter
from cyclopts.exceptions import CycloptsError
from pydantic import ValidationError

from workperf import __version__
from workperf.cli_utils import print_error, print_usage
from workperf.common.config import LoadConfig
from workperf.common.environment import Environment
from workperf.common.exceptions import ConfigurationError

app = App(
    name="workperf",
    help="Drive concurrent work requests against a backend over REST or gRPC "
    "and report nearest-rank latency percentiles.",
    version=__version__,
)

server_app = App(
    name="workperf-server",
    help="Serve the reference work service over REST and gRPC.",
    version=__version__,
)


@app.default
def profile(
    *,
    load_config: Annotated[LoadConfig, Parameter(name="*")] = LoadConfig(),
) -> int:
    """Run a load test. Count mode by default; --durationSeconds > 0 selects duration mode."""
    from workperf.cli_runner import run_load_driver

    return run_load_driver(load_config)


@server_app.default
def serve(
    *,
    host: Annotated[str, Parameter(name=("--host",))] = Environment.SERVER.HOST,
    rest_port: Annotated[int, Parameter(name=("--rest-port",))] = Environment.SERVER.REST_PORT,
    grpc_port: Annotated[
        int, Parameter(name=("--grpc-port",), help="gRPC port, 0 disables gRPC.")
    ] = Environment.SERVER.GRPC_PORT,
    log_level: Annotated[
        Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        Parameter(name=("--log-level",)),
    ] = "INFO",
) -> int:
    """Serve POST /api/work and WorkService.GetWork until interrupted."""
    from workperf.cli_runner import run_work_server

    return run_work_server(host, rest_port, grpc_port or None, log_level)


def _invoke(cli: App, tokens: list[str] | None, show_usage: bool) -> int:
    try:
        result = cli(tokens, exit_on_error=False, print_error=True)
    except CycloptsError:
        # cyclopts has already printed the error panel.
        if show_usage:
            print_usage()
        return 1
    except (ValidationError, ConfigurationError) as e:
        print_error(str(e), title="Configuration Error")
        if show_usage:
            print_usage()
        return 1
    return result if isinstance(result, int) else 0


def main(tokens: list[str] | None = None) -> int:
    return _invoke(app, tokens, show_usage=True)


def server_main(tokens: list[str] | None = None) -> int:
    return _invoke(server_app, tokens, show_usage=False)


if __name__ == "__main__":
    sys.exit(main())
