# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Runs the REST and gRPC endpoints of the reference target service together."""

import asyncio

from aiohttp import web

from workperf.common.environment import Environment
from workperf.common.gc_monitor import GcCounterMonitor
from workperf.common.logging import LoggerMixin
from workperf.server.grpc_service import create_grpc_server
from workperf.server.rest_app import create_app


class WorkServer(LoggerMixin):
    """REST (aiohttp) plus optional gRPC (grpc.aio) server sharing one event loop.

    A port of 0 for REST binds an ephemeral port; a gRPC port of None disables gRPC.
    """

    def __init__(
        self, host: str, rest_port: int, grpc_port: int | None = None, **kwargs
    ) -> None:
        super().__init__(**kwargs)
        self.host = host
        self.rest_port = rest_port
        self.grpc_port = grpc_port
        self._rest_runner: web.AppRunner | None = None
        self._grpc_server = None
        self._gc_monitor = GcCounterMonitor(prefix=Environment.SERVER.SERVICE_NAME)

    async def start(self) -> None:
        self._rest_runner = web.AppRunner(create_app())
        await self._rest_runner.setup()
        site = web.TCPSite(self._rest_runner, self.host, self.rest_port)
        await site.start()
        # Read back the bound port in case an ephemeral one was requested.
        self.rest_port = self._rest_runner.addresses[0][1]
        self.info(f"REST endpoint listening on http://{self.host}:{self.rest_port}")

        if self.grpc_port is not None:
            self._grpc_server = create_grpc_server()
            self.grpc_port = self._grpc_server.add_insecure_port(
                f"{self.host}:{self.grpc_port}"
            )
            await self._grpc_server.start()
            self.info(f"gRPC endpoint listening on {self.host}:{self.grpc_port}")

        self._gc_monitor.start()

    async def stop(self) -> None:
        self._gc_monitor.stop()
        if self._grpc_server is not None:
            await self._grpc_server.stop(grace=1.0)
            self._grpc_server = None
        if self._rest_runner is not None:
            await self._rest_runner.cleanup()
            self._rest_runner = None
        self.debug("Work server stopped")

    async def serve_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
