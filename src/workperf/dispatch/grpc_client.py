# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""gRPC transport: unary `WorkService.GetWork` calls over insecure grpc.aio channels."""

import grpc

from workperf.common.environment import Environment
from workperf.proto import GET_WORK_METHOD, WorkRequest, WorkResponse


class GrpcTransport:
    """Keeps one channel per target address for the lifetime of a run."""

    def __init__(self) -> None:
        self._channels: dict[str, grpc.aio.Channel] = {}
        self._calls: dict[str, grpc.aio.UnaryUnaryMultiCallable] = {}

    def _get_call(self, address: str) -> grpc.aio.UnaryUnaryMultiCallable:
        call = self._calls.get(address)
        if call is None:
            max_length = Environment.TARGET.GRPC_MAX_MESSAGE_LENGTH
            channel = grpc.aio.insecure_channel(
                address,
                options=[
                    ("grpc.max_receive_message_length", max_length),
                    ("grpc.max_send_message_length", max_length),
                ],
            )
            call = channel.unary_unary(
                GET_WORK_METHOD,
                request_serializer=WorkRequest.SerializeToString,
                response_deserializer=WorkResponse.FromString,
            )
            self._channels[address] = channel
            self._calls[address] = call
        return call

    async def send(
        self,
        address: str,
        payload_size: int,
        correlation_id: str,
        metadata: list[tuple[str, str]],
    ) -> int:
        """Send one GetWork call.

        Returns:
            Length of the returned `big_string`.

        Raises:
            grpc.aio.AioRpcError: On any non-OK status.
        """
        request = WorkRequest(payload_size=payload_size, correlation_id=correlation_id)
        response = await self._get_call(address)(request, metadata=tuple(metadata))
        return len(response.big_string)

    async def close(self) -> None:
        channels = list(self._channels.values())
        self._channels.clear()
        self._calls.clear()
        for channel in channels:
            await channel.close()
