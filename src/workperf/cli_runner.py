# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import asyncio
from typing import TYPE_CHECKING

from workperf.cli_utils import print_error
from workperf.common.exceptions import FatalRunError
from workperf.common.logging import setup_rich_logging

if TYPE_CHECKING:
    from workperf.common.config import LoadConfig, RunConfig
    from workperf.common.models import RunResult


def run_load_driver(load_config: "LoadConfig") -> int:
    """Run one load test from CLI settings, print the summary and return the exit code.

    Per-request failures do not affect the exit code. A fatal driver failure
    prints an error and returns 1 without any statistics.
    """
    import logging

    from workperf.exporters import ConsoleExporter, JsonExporter
    from workperf.telemetry import start_telemetry

    setup_rich_logging(load_config.log_level)
    logger = logging.getLogger(__name__)

    run_config = load_config.to_run_config()
    providers = start_telemetry()
    try:
        result = asyncio.run(_run(run_config))
    except FatalRunError as e:
        logger.debug("Load run failed", exc_info=True)
        print_error(str(e), title="Load Run Failed")
        return 1
    finally:
        if providers is not None:
            providers.shutdown()

    ConsoleExporter(run_config, result).export()

    if load_config.output_file is not None:
        path = JsonExporter(run_config, result, load_config.output_file).export()
        logger.info(f"Run result written to: {path}")

    return 0


async def _run(run_config: "RunConfig") -> "RunResult":
    from workperf.dispatch import Dispatcher
    from workperf.driver import LoadDriver

    async with Dispatcher() as dispatcher:
        return await LoadDriver(dispatcher).run(run_config)


def run_work_server(
    host: str, rest_port: int, grpc_port: int | None, log_level: str = "INFO"
) -> int:
    """Serve the reference work service until interrupted."""
    import logging

    from workperf.common.environment import Environment
    from workperf.server import WorkServer
    from workperf.telemetry import start_telemetry

    setup_rich_logging(log_level)
    logger = logging.getLogger(__name__)

    providers = start_telemetry(service_name=Environment.SERVER.SERVICE_NAME)
    server = WorkServer(host=host, rest_port=rest_port, grpc_port=grpc_port)
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Work server interrupted, shutting down")
    finally:
        if providers is not None:
            providers.shutdown()
    return 0
