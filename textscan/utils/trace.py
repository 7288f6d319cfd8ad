from __future__ import annotations

import uuid

import structlog
from fastapi import Request

TRACE_HEADER = "x-trace-id"


async def trace_context_middleware(request: Request, call_next):
    trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex
    with structlog.contextvars.bound_contextvars(trace_id=trace_id):
        response = await call_next(request)
    response.headers[TRACE_HEADER] = trace_id
    return response


def get_trace_id() -> str:
    """Trace id bound for the current request, or a fresh one outside a request."""
    return structlog.contextvars.get_contextvars().get("trace_id") or uuid.uuid4().hex
