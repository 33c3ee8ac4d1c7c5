# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""aiohttp application serving `POST /api/work`."""

import logging

import orjson
from aiohttp import web
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode
from pydantic import ValidationError

from workperf.common.constants import WORK_API_PATH
from workperf.common.models import WorkRequest, WorkResponse
from workperf.server.payload import generate_payload
from workperf.telemetry import extract_trace_context, get_tracer

logger = logging.getLogger(__name__)


@web.middleware
async def server_span_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Open a SERVER span per request, continuing the caller's trace from the headers."""
    tracer = get_tracer()
    parent = extract_trace_context(dict(request.headers))
    with tracer.start_as_current_span(
        f"{request.method} {request.path}",
        context=parent,
        kind=SpanKind.SERVER,
        attributes={"http.request.method": request.method, "url.path": request.path},
    ) as span:
        response = await handler(request)
        span.set_attribute("http.response.status_code", response.status)
        if response.status >= 500:
            span.set_status(Status(StatusCode.ERROR))
        return response


async def handle_work(request: web.Request) -> web.Response:
    try:
        work_request = WorkRequest.model_validate(orjson.loads(await request.read()))
    except (orjson.JSONDecodeError, ValidationError) as e:
        logger.debug(f"Rejected work request: {e}")
        return web.json_response({"error": "invalid request body"}, status=400)

    server_span = trace.get_current_span()
    server_span.set_attribute("correlationId", work_request.correlation_id or "")
    server_span.set_attribute("payload.size", work_request.payload_size)

    with get_tracer().start_as_current_span("GeneratePayload") as span:
        span.set_attribute("payload.size", work_request.payload_size)
        payload = generate_payload(work_request.payload_size)

    body = WorkResponse(
        big_string=payload.big_string,
        items=payload.items,
        metadata=payload.metadata,
    ).model_dump(by_alias=True)
    return web.Response(body=orjson.dumps(body), content_type="application/json")


def create_app() -> web.Application:
    app = web.Application(middlewares=[server_span_middleware])
    app.router.add_post(WORK_API_PATH, handle_work)
    return app
