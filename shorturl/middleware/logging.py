"""
Request logging middleware for FastAPI using Loguru.

Each request gets an ID, returned in the X-Request-ID header, and one
access line at the custom REQUEST level once the response is ready.
"""

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from shorturl.core.logging import REQUEST_LEVEL

REQUEST_ID_HEADER = "X-Request-ID"


def get_client_ip(request: Request) -> str:
    """Client IP, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # Reuse an incoming request ID so traces line up across proxies
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        start_time = time.perf_counter()
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.log(
            REQUEST_LEVEL,
            "{method} {path} {status_code} {process_time_ms}ms",
            request_id=request_id,
            client_ip=get_client_ip(request),
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=process_time_ms,
        )
        return response
