# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""grpc.aio implementation of `WorkService.GetWork`."""

import grpc
from opentelemetry.trace import SpanKind

from workperf.common.environment import Environment
from workperf.proto import SERVICE_NAME, WorkRequest, WorkResponse
from workperf.server.payload import generate_payload
from workperf.telemetry import extract_trace_context, get_tracer


async def get_work(request: WorkRequest, context: grpc.aio.ServicerContext) -> WorkResponse:
    tracer = get_tracer()
    parent = extract_trace_context(
        {key: value for key, value in context.invocation_metadata() or ()}
    )
    with tracer.start_as_current_span(
        "WorkService/GetWork",
        context=parent,
        kind=SpanKind.SERVER,
        attributes={
            "rpc.system": "grpc",
            "rpc.service": SERVICE_NAME,
            "rpc.method": "GetWork",
            "correlationId": request.correlation_id,
            "payload.size": request.payload_size,
        },
    ):
        with tracer.start_as_current_span("GeneratePayload") as span:
            span.set_attribute("payload.size", request.payload_size)
            payload = generate_payload(request.payload_size)

        response = WorkResponse(big_string=payload.big_string)
        response.items.extend(payload.items)
        response.metadata.update(payload.metadata)
        return response


def create_grpc_server() -> grpc.aio.Server:
    """Create an unstarted server with WorkService registered. Bind a port before starting."""
    max_length = Environment.TARGET.GRPC_MAX_MESSAGE_LENGTH
    server = grpc.aio.server(
        options=[
            ("grpc.max_receive_message_length", max_length),
            ("grpc.max_send_message_length", max_length),
        ]
    )
    handler = grpc.method_handlers_generic_handler(
        SERVICE_NAME,
        {
            "GetWork": grpc.unary_unary_rpc_method_handler(
                get_work,
                request_deserializer=WorkRequest.FromString,
                response_serializer=WorkResponse.SerializeToString,
            )
        },
    )
    server.add_generic_rpc_handlers((handler,))
    return server
